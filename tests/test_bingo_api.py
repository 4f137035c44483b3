import threading

from conftest import register
from gstrong import db
from gstrong.bingo_core import BingoBoard
from gstrong.models.bingo import BingoCard
from gstrong.models.user_stats import UserStats
from gstrong.routes import bingo_routes


def toggle(client, headers, index):
    res = client.post(f'/api/bingo/cells/{index}/toggle', headers=headers)
    assert res.status_code == 200, res.get_json()
    return res.get_json()


def test_new_card_has_only_free_cell(client, auth):
    _, headers = auth
    res = client.get('/api/bingo', headers=headers)
    assert res.status_code == 200
    body = res.get_json()
    card = body['card']
    assert card['completed_count'] == 1
    assert card['cells'][10]['is_free'] is True
    assert card['cells'][10]['completed'] is True
    assert card['completed_lines'] == []
    assert len(body['lines']) == 12
    assert body['rewards'] == {'square': 10, 'line': 50, 'full_card': 200}


def test_marking_a_square_pays_once(client, auth):
    _, headers = auth
    body = toggle(client, headers, 0)
    assert body['toggle']['completed'] is True
    assert body['points_awarded'] == 10
    assert body['stats']['points'] == 10
    assert body['stats']['bingo_squares_completed'] == 1

    # unmark: nothing taken back
    body = toggle(client, headers, 0)
    assert body['toggle']['completed'] is False
    assert body['points_awarded'] == 0
    assert body['stats']['points'] == 10

    # re-mark: already paid for this card
    body = toggle(client, headers, 0)
    assert body['points_awarded'] == 0
    assert body['stats']['points'] == 10
    assert body['stats']['bingo_squares_completed'] == 1


def test_completing_a_row_pays_line_bonus(client, auth):
    _, headers = auth
    for i in range(4):
        toggle(client, headers, i)
    body = toggle(client, headers, 4)

    assert body['toggle']['new_lines'] == [0]
    reasons = [a['reason'] for a in body['awards']]
    assert reasons == ['square', 'line']
    assert body['stats']['points'] == 5 * 10 + 50
    assert body['card']['completed_lines'] == [0]


def test_line_bonus_is_never_paid_twice(client, auth):
    _, headers = auth
    for i in range(5):
        toggle(client, headers, i)
    toggle(client, headers, 4)
    body = toggle(client, headers, 4)

    assert body['toggle']['new_lines'] == []
    assert body['points_awarded'] == 0
    assert body['card']['completed_lines'] == [0]
    assert body['stats']['points'] == 100


def test_free_cell_toggle_is_noop(client, auth):
    _, headers = auth
    body = toggle(client, headers, 10)
    assert body['toggle']['changed'] is False
    assert body['awards'] == []
    assert body['card']['completed_count'] == 1
    assert body['stats']['points'] == 0


def test_out_of_range_cell(client, auth):
    _, headers = auth
    res = client.post('/api/bingo/cells/25/toggle', headers=headers)
    assert res.status_code == 400


def test_full_card(client, auth):
    _, headers = auth
    body = None
    for i in range(25):
        if i == 10:
            continue
        body = toggle(client, headers, i)

    assert body['toggle']['full_card'] is True
    assert sorted(body['toggle']['new_lines']) == [4, 9, 10]
    assert body['card']['full_card_awarded'] is True
    assert len(body['card']['completed_lines']) == 12

    # 24 squares + 12 lines + full card, then Bingo Champion and High Voltage
    assert body['stats']['points'] == 24 * 10 + 12 * 50 + 200 + 150 + 250
    assert body['stats']['level'] == body['stats']['xp'] // 600 + 1
    codes = {a['id'] for a in body['unlocked_achievements']}
    assert codes == {'bingo_champion', 'high_voltage'}


def test_cards_are_per_user(client, auth):
    _, headers = auth
    toggle(client, headers, 0)

    other = register(client, 'bob')
    other_headers = {'Authorization': f"Bearer {other['token']}"}
    card = client.get('/api/bingo', headers=other_headers).get_json()['card']
    assert card['completed_count'] == 1


def test_first_load_race_reuses_existing_card(client, auth, monkeypatch):
    user_id, headers = auth
    toggle(client, headers, 0)

    real_find = bingo_routes._find_card
    lookups = []

    def find_before_other_commit(uid, monday, for_update=False):
        lookups.append(uid)
        if len(lookups) == 1:
            # the other request has not committed its card yet
            return None
        return real_find(uid, monday, for_update)

    monkeypatch.setattr(bingo_routes, '_find_card', find_before_other_commit)

    res = client.get('/api/bingo', headers=headers)
    assert res.status_code == 200
    assert res.get_json()['card']['completed_count'] == 2
    assert len(lookups) == 2
    assert BingoCard.query.filter_by(user_id=user_id).count() == 1


def toggles_in_lockstep(monkeypatch):
    """The first two BingoBoard.toggle calls wait for each other; returns the call log."""
    barrier = threading.Barrier(2, timeout=10)
    lock = threading.Lock()
    calls = []
    real_toggle = BingoBoard.toggle

    def toggle_together(self, index):
        with lock:
            calls.append(index)
            wait = len(calls) <= 2
        if wait:
            barrier.wait()
        return real_toggle(self, index)

    monkeypatch.setattr(BingoBoard, 'toggle', toggle_together)
    return calls


def double_tap(app, headers, index):
    responses = []

    def tap():
        responses.append(app.test_client().post(f'/api/bingo/cells/{index}/toggle', headers=headers))

    threads = [threading.Thread(target=tap) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return responses


def file_user(app):
    data = register(app.test_client())
    return data['user']['id'], {'Authorization': f"Bearer {data['token']}"}


def test_double_tap_pays_square_once(file_app, monkeypatch):
    user_id, headers = file_user(file_app)
    file_app.test_client().get('/api/bingo', headers=headers)
    calls = toggles_in_lockstep(monkeypatch)

    responses = double_tap(file_app, headers, 0)

    assert [r.status_code for r in responses] == [200, 200]
    # the slower tap re-read the card and toggled it back off
    assert len(calls) == 3

    db.session.expire_all()
    stats = db.session.get(UserStats, user_id)
    assert stats.points == 10
    assert stats.bingo_squares_completed == 1

    card = BingoCard.query.filter_by(user_id=user_id).one()
    assert card.awarded_cells == [0]
    assert 0 not in card.completed_cells


def test_double_tap_credits_line_once(file_app, monkeypatch):
    user_id, headers = file_user(file_app)
    client = file_app.test_client()
    for i in range(4):
        toggle(client, headers, i)
    toggles_in_lockstep(monkeypatch)

    responses = double_tap(file_app, headers, 4)

    assert sorted(r.get_json()['toggle']['new_lines'] for r in responses) == [[], [0]]

    db.session.expire_all()
    card = BingoCard.query.filter_by(user_id=user_id).one()
    assert card.completed_lines == [0]
    # five squares and one line
    assert db.session.get(UserStats, user_id).points == 5 * 10 + 50
