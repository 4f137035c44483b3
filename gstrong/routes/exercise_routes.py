# gstrong/routes/exercise_routes.py
from typing import Any, Dict, List

from flask import Blueprint, jsonify, request

exercises_bp = Blueprint("exercises", __name__)

DIFFICULTIES = ["Beginner", "Intermediate", "Advanced"]

MUSCLE_GROUPS = [
    {"id": "chest", "name": "Chest", "tags": ["Push-ups", "Bench Press", "Chest Fly"]},
    {"id": "back", "name": "Back", "tags": ["Pull-ups", "Rows", "Deadlifts"]},
    {"id": "legs", "name": "Legs", "tags": ["Squats", "Lunges", "Leg Press"]},
    {"id": "shoulders", "name": "Shoulders", "tags": ["Shoulder Press", "Lateral Raises", "Front Raises"]},
    {"id": "arms", "name": "Arms", "tags": ["Bicep Curls", "Tricep Extensions", "Hammer Curls"]},
    {"id": "core", "name": "Core", "tags": ["Plank", "Crunches", "Russian Twists"]},
]

GROUP_IDS = [g["id"] for g in MUSCLE_GROUPS]


def _ex(id, name, group, difficulty, sets, reps, muscles, pro_tip=None):
    return {
        "id": id,
        "name": name,
        "group": group,
        "difficulty": difficulty,
        "sets": sets,
        "reps": reps,
        "muscles": muscles,
        "pro_tip": pro_tip,
    }


# The exercise library the workout builder picks from, one block per muscle group.
EXERCISES: Dict[str, Dict[str, Any]] = {
    e["id"]: e
    for e in [
        # chest
        _ex("bench_press", "Barbell Bench Press", "chest", "Intermediate", "3-4 sets", "8-12 reps",
            ["Pectoralis Major", "Triceps", "Anterior Deltoids"],
            "Keep your shoulder blades retracted and maintain a slight arch in your lower back"),
        _ex("pushups", "Push-Ups", "chest", "Beginner", "3-4 sets", "15-20 reps",
            ["Pectoralis Major", "Triceps", "Core"],
            "Squeeze your glutes and core throughout the entire movement to protect your lower back"),
        _ex("dumbbell_fly", "Dumbbell Fly", "chest", "Intermediate", "3 sets", "10-15 reps",
            ["Pectoralis Major", "Anterior Deltoids"],
            "Think of hugging a giant tree, the arc motion is key, not a press"),
        _ex("chest_dips", "Chest Dips", "chest", "Intermediate", "3 sets", "8-12 reps",
            ["Pectoralis Major", "Triceps", "Anterior Deltoids"],
            "The more you lean forward, the more you shift the work onto your chest vs triceps"),
        _ex("incline_press", "Incline Press", "chest", "Advanced", "4 sets", "6-10 reps",
            ["Upper Pectoralis", "Anterior Deltoids", "Triceps"],
            "Keep the incline under 45° or the work shifts to your shoulders"),
        _ex("cable_crossover", "Cable Crossover", "chest", "Advanced", "3 sets", "12-15 reps",
            ["Pectoralis Major", "Anterior Deltoids"],
            "Slow down the eccentric (return) phase, that's where most chest growth happens"),
        # back
        _ex("barbell_rows", "Barbell Rows", "back", "Intermediate", "3-4 sets", "8-12 reps",
            ["Latissimus Dorsi", "Rhomboids", "Biceps"],
            "Keep your torso as close to parallel to the floor as possible"),
        _ex("deadlift", "Deadlift", "back", "Advanced", "3-5 sets", "3-6 reps",
            ["Erector Spinae", "Latissimus Dorsi", "Glutes", "Hamstrings"],
            'Think "push the floor away" rather than "pull the bar up"'),
        _ex("face_pull", "Face Pull", "back", "Beginner", "3-4 sets", "15-20 reps",
            ["Rear Deltoids", "Rhomboids", "Rotator Cuff"],
            "Do these every single session for shoulder health and posture"),
        _ex("pull_ups", "Pull-Ups", "back", "Intermediate", "3-4 sets", "6-12 reps",
            ["Latissimus Dorsi", "Biceps", "Rear Deltoids"],
            "Drive your elbows to your hips rather than pulling with your hands"),
        _ex("romanian_deadlift", "Romanian Deadlift", "back", "Intermediate", "3-4 sets", "10-12 reps",
            ["Hamstrings", "Glutes", "Erector Spinae"],
            "The bar should stay in contact with your legs the entire way down"),
        _ex("lat_pulldown", "Lateral Pulldown", "back", "Beginner", "3-4 sets", "10-15 reps",
            ["Latissimus Dorsi", "Biceps", "Rear Deltoids"],
            "Pull to your upper chest, not behind your neck"),
        # arms
        _ex("bicep_curl", "Bicep Curl", "arms", "Beginner", "3-4 sets", "10-15 reps",
            ["Biceps Brachii", "Brachialis"],
            "Supinate your wrists at the top of each rep to fully contract the bicep peak"),
        _ex("hammer_curl", "Hammer Curl", "arms", "Beginner", "3-4 sets", "10-12 reps",
            ["Brachialis", "Brachioradialis", "Biceps Brachii"],
            "Hammer curls hit the brachialis harder than regular curls"),
        _ex("concentration_curl", "Concentration Curl", "arms", "Intermediate", "3 sets", "10-12 reps each arm",
            ["Biceps Brachii", "Brachialis"],
            "Go slow and feel every rep"),
        _ex("close_grip", "Close Grip Bench Press", "arms", "Intermediate", "3-4 sets", "8-12 reps",
            ["Triceps Brachii", "Anterior Deltoids", "Pectoralis Major"],
            "Shoulder-width is the sweet spot for tricep emphasis"),
        _ex("overhead_tricep", "Overhead Tricep Extension", "arms", "Beginner", "3-4 sets", "12-15 reps",
            ["Triceps Brachii (Long Head)", "Triceps Brachii (Lateral Head)"],
            "The overhead position is the only way to fully stretch the long head of the tricep"),
        _ex("tricep_dips", "Tricep Dips", "arms", "Intermediate", "3-4 sets", "10-15 reps",
            ["Triceps Brachii", "Anterior Deltoids", "Pectoralis Minor"],
            "Stay as upright as possible to keep the focus on your triceps"),
        # legs
        _ex("squat", "Squat", "legs", "Beginner", "3-4 sets", "8-12 reps",
            ["Quadriceps", "Glutes", "Hamstrings", "Core"],
            "Aim for at least parallel every single rep"),
        _ex("bulgarian_split_squat", "Bulgarian Split Squat", "legs", "Advanced", "3-4 sets", "8-10 reps each leg",
            ["Quadriceps", "Glutes", "Hamstrings", "Hip Flexors"],
            "Start with bodyweight only and master the balance before adding load"),
        _ex("lunges", "Lunges", "legs", "Beginner", "3 sets", "12 reps each leg",
            ["Quadriceps", "Glutes", "Hamstrings"],
            "Alternate walking and stationary lunges across sessions"),
        _ex("leg_press", "Leg Press", "legs", "Beginner", "3-4 sets", "10-15 reps",
            ["Quadriceps", "Glutes", "Hamstrings"],
            "Higher foot placement targets glutes and hamstrings, lower hits quads harder"),
        _ex("leg_curl", "Leg Curl", "legs", "Beginner", "3-4 sets", "12-15 reps",
            ["Hamstrings", "Gastrocnemius"]),
        _ex("calf_raise", "Calf Raise", "legs", "Beginner", "4 sets", "15-25 reps",
            ["Gastrocnemius", "Soleus"],
            "High reps with a full stretch at the bottom and a hard squeeze at the top"),
        # shoulders
        _ex("dumbbell_shoulder_press", "Dumbbell Shoulder Press", "shoulders", "Beginner", "3-4 sets", "10-12 reps",
            ["Anterior Deltoids", "Lateral Deltoids", "Triceps"],
            "Keep your elbows at about 45° to protect your rotator cuff"),
        _ex("arnold_press", "Arnold Press", "shoulders", "Intermediate", "3-4 sets", "10-12 reps",
            ["Anterior Deltoids", "Lateral Deltoids", "Rear Deltoids"],
            "Go lighter than your normal press and focus on the full range of motion"),
        _ex("front_raise", "Front Raise", "shoulders", "Beginner", "3 sets", "12-15 reps",
            ["Anterior Deltoids", "Upper Pectoralis"],
            "If you need momentum to lift the weight, it's too heavy"),
        _ex("lateral_raise", "Lateral Raise", "shoulders", "Beginner", "3-4 sets", "12-20 reps",
            ["Lateral Deltoids", "Supraspinatus"],
            "Tilt the dumbbells so the pinky side is higher than the thumb"),
        _ex("reverse_fly", "Reverse Fly", "shoulders", "Intermediate", "3-4 sets", "12-15 reps",
            ["Rear Deltoids", "Rhomboids", "Trapezius"],
            "Use light weight and focus entirely on feeling the contraction"),
        _ex("upright_row", "Upright Row", "shoulders", "Intermediate", "3 sets", "10-12 reps",
            ["Lateral Deltoids", "Trapezius", "Biceps"],
            "Use a wider grip to reduce shoulder impingement risk"),
        # core
        _ex("plank", "Plank", "core", "Beginner", "3-4 sets", "30-60 seconds",
            ["Transverse Abdominis", "Rectus Abdominis", "Glutes", "Shoulders"],
            "Quality beats duration every time"),
        _ex("bicycle_crunch", "Bicycle Crunch", "core", "Beginner", "3 sets", "20 reps each side",
            ["Rectus Abdominis", "Obliques", "Hip Flexors"],
            "Focus on rotating your torso, not just your elbows"),
        _ex("russian_twists", "Russian Twists", "core", "Intermediate", "3-4 sets", "20 reps each side",
            ["Obliques", "Rectus Abdominis", "Hip Flexors"],
            "Add a dumbbell or weight plate once bodyweight gets easy"),
        _ex("hanging_leg", "Hanging Leg Raise", "core", "Advanced", "3-4 sets", "10-15 reps",
            ["Lower Rectus Abdominis", "Hip Flexors", "Obliques"],
            "Start with knee raises and work toward straight-leg raises"),
        _ex("dead_bug", "Dead Bug", "core", "Beginner", "3 sets", "10 reps each side",
            ["Transverse Abdominis", "Rectus Abdominis", "Spinal Erectors"],
            "Trains your abs to resist movement rather than create it"),
        _ex("mountain_climbers", "Mountain Climbers", "core", "Intermediate", "3-4 sets", "30-45 seconds",
            ["Rectus Abdominis", "Obliques", "Hip Flexors", "Shoulders"],
            "Speed up for conditioning, slow down for deeper core activation"),
    ]
}


def _matches(exercise: Dict[str, Any], query: str) -> bool:
    query = query.lower()
    if query in exercise["name"].lower():
        return True
    return any(query in m.lower() for m in exercise["muscles"])


@exercises_bp.route("", methods=["GET"])
def list_exercises():
    """
    Public: the exercise library, optionally filtered.

    GET /api/exercises?group=chest&difficulty=Beginner&q=press
    `difficulty=All` (or no difficulty) means no difficulty filter.
    `q` matches the exercise name or any of its muscles, case-insensitive.
    """
    group = (request.args.get("group") or "").strip().lower()
    difficulty = (request.args.get("difficulty") or "").strip()
    query = (request.args.get("q") or "").strip()

    if group and group not in GROUP_IDS:
        return jsonify({"message": f"invalid group, expected one of {', '.join(GROUP_IDS)}"}), 400

    if difficulty == "All":
        difficulty = ""
    if difficulty and difficulty not in DIFFICULTIES:
        return jsonify({"message": f"invalid difficulty, expected one of {', '.join(DIFFICULTIES)}"}), 400

    exercises: List[Dict[str, Any]] = []
    for ex in EXERCISES.values():
        if group and ex["group"] != group:
            continue
        if difficulty and ex["difficulty"] != difficulty:
            continue
        if query and not _matches(ex, query):
            continue
        exercises.append(ex)

    return jsonify({"exercises": exercises, "count": len(exercises)}), 200


@exercises_bp.route("/groups", methods=["GET"])
def list_groups():
    """
    Public: muscle groups with how many exercises each one has.

    GET /api/exercises/groups
    """
    groups = []
    for g in MUSCLE_GROUPS:
        count = sum(1 for ex in EXERCISES.values() if ex["group"] == g["id"])
        groups.append({**g, "count": count})
    return jsonify({"groups": groups}), 200


@exercises_bp.route("/<exercise_id>", methods=["GET"])
def get_exercise(exercise_id):
    """
    Public: a single exercise.

    GET /api/exercises/<exercise_id>
    """
    exercise = EXERCISES.get((exercise_id or "").lower())
    if not exercise:
        return jsonify({"message": "Exercise not found"}), 404

    return jsonify({"exercise": exercise}), 200
