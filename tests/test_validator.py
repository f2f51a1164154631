from savetrack_core.services.validator import validate_plan


GOAL = {
    "target_longterm": 1000000,
    "target_buffer": 50000,
    "current_longterm": 0,
    "current_buffer": 0,
    "target_year": 2035,
}


def test_empty_stages_is_a_single_issue():
    issues = validate_plan({"stages": []})
    assert issues == ["Plan must include a non-empty stages array."]


def test_missing_or_wrong_type_stages_fails_closed():
    assert len(validate_plan({})) == 1
    assert len(validate_plan({"stages": "nope"})) == 1
    assert len(validate_plan(None)) == 1


def test_valid_plan_has_no_issues():
    plan = {
        "stages": [
            {"name": "A", "from": "2024-01", "to": "2024-12"},
            {"name": "B", "from": "2025-01"},
        ],
        "goal": GOAL,
    }
    assert validate_plan(plan) == []


def test_every_malformed_stage_is_reported():
    plan = {
        "stages": [
            {"name": "", "from": "2024-13"},
            {"name": "B", "from": "24-01", "to": "2025-1"},
        ]
    }
    issues = validate_plan(plan)
    assert len(issues) >= 2
    assert any(issue.startswith("Stage 1") for issue in issues)
    assert any(issue.startswith("Stage 2") for issue in issues)
    assert "Stage 2 has an invalid to (YYYY-MM)." in issues


def test_stage_ending_before_it_starts():
    issues = validate_plan({"stages": [{"name": "A", "from": "2025-06", "to": "2025-01"}]})
    assert len(issues) == 1
    assert "ends" in issues[0]


def test_goal_keys_are_checked_for_presence_only():
    goal = dict(GOAL)
    del goal["target_year"]
    goal["target_buffer"] = "not a number"
    issues = validate_plan({"stages": [{"name": "A", "from": "2025-01"}], "goal": goal})
    assert issues == ["Goal must include target_year."]


def test_empty_to_is_treated_as_open_ended():
    assert validate_plan({"stages": [{"name": "A", "from": "2025-01", "to": ""}]}) == []


def test_empty_goal_reports_every_missing_key():
    issues = validate_plan({"stages": [{"name": "A", "from": "2025-01"}], "goal": {}})
    assert len(issues) == 5
    assert "Goal must include target_longterm." in issues


def test_non_object_goal_is_reported():
    issues = validate_plan({"stages": [{"name": "A", "from": "2025-01"}], "goal": []})
    assert issues == ["Goal must be an object."]


def test_year_month_with_trailing_newline_is_rejected():
    issues = validate_plan({"stages": [{"name": "A", "from": "2025-03\n"}]})
    assert issues == ["Stage 1 must include a valid from (YYYY-MM)."]
