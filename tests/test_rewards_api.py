def test_overview_for_new_user(client, auth):
    _, headers = auth
    res = client.get('/api/rewards/overview', headers=headers)
    assert res.status_code == 200
    body = res.get_json()

    summary = body['summary']
    assert summary['total_points'] == 0
    assert summary['level'] == 1
    assert summary['xp_to_next_level'] == 600
    assert summary['unlocked_achievements_count'] == 0
    assert summary['total_achievements_count'] == 10
    assert body['unlocked'] == []
    assert len(body['locked']) == 10
    assert body['category_colors']['Lifetime'] == '#a855f7'


def test_overview_after_first_workout(client, auth):
    _, headers = auth
    res = client.post('/api/workouts', headers=headers, json={
        'name': 'Quick', 'type': 'circuit', 'exercises': [{'name': 'Burpees', 'sets': 3, 'reps': 10}],
    })
    workout_id = res.get_json()['workout']['id']
    client.post(f'/api/workouts/{workout_id}/complete', headers=headers, json={'local_hour': 12})

    body = client.get('/api/rewards/overview', headers=headers).get_json()
    unlocked = {a['id']: a for a in body['unlocked']}
    locked = {a['id']: a for a in body['locked']}

    assert set(unlocked) == {'first_step'}
    assert unlocked['first_step']['unlocked'] is True
    assert unlocked['first_step']['progress'] == unlocked['first_step']['total'] == 1
    assert body['summary']['achievement_points'] == 20
    assert body['summary']['total_points'] == 40
    assert body['summary']['overall_progress_percent'] == 10

    assert locked['high_voltage']['progress'] == 40
    assert locked['high_voltage']['total'] == 1000
    # a circuit session is not a strength workout
    assert locked['muscle_machine']['progress'] == 0
    assert locked['streak_master']['progress'] == 0


def test_bingo_progress_in_overview(client, auth):
    _, headers = auth
    client.post('/api/bingo/cells/0/toggle', headers=headers)
    body = client.get('/api/rewards/overview', headers=headers).get_json()
    locked = {a['id']: a for a in body['locked']}
    assert locked['bingo_champion']['progress'] == 2
    assert locked['bingo_champion']['total'] == 25


def test_category_filter(client, auth):
    _, headers = auth
    body = client.get('/api/rewards/overview?category=Weekly', headers=headers).get_json()
    assert {a['category'] for a in body['locked']} == {'Weekly'}
    assert len(body['locked']) == 3

    assert client.get('/api/rewards/overview?category=Daily', headers=headers).status_code == 400


def test_muscle_machine_counts_completed_strength_workouts(client, auth):
    _, headers = auth
    for workout_type in ('strength', 'strength', 'cardio'):
        res = client.post('/api/workouts', headers=headers, json={
            'name': 'Session', 'type': workout_type, 'exercises': [{'name': 'Squat', 'sets': 5, 'reps': 5}],
        })
        workout_id = res.get_json()['workout']['id']
        client.post(f'/api/workouts/{workout_id}/complete', headers=headers, json={'local_hour': 12})

    # saved but never completed
    client.post('/api/workouts', headers=headers, json={
        'name': 'Later', 'type': 'strength', 'exercises': [{'name': 'Squat', 'sets': 5, 'reps': 5}],
    })

    body = client.get('/api/rewards/overview', headers=headers).get_json()
    locked = {a['id']: a for a in body['locked']}
    assert locked['muscle_machine']['progress'] == 2
    assert locked['muscle_machine']['total'] == 50


def test_condition_types_are_known():
    from gstrong.achievements import ACHIEVEMENTS_BY_CODE

    assert ACHIEVEMENTS_BY_CODE['bingo_champion']['condition_type'] == 'bingo_full_card'
    assert ACHIEVEMENTS_BY_CODE['muscle_machine']['condition_type'] == 'strength_workouts'
