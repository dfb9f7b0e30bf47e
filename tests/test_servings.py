from recipe_ai_core.servings import resolve_servings, round_half_up


def test_resolve_servings_examples():
    assert resolve_servings("4-6") == 5
    assert resolve_servings("4 to 6") == 5
    assert resolve_servings("7") == 7
    assert resolve_servings(None) is None
    assert resolve_servings("serves many") is None


def test_resolve_servings_ranges():
    assert resolve_servings("4 – 6") == 5
    assert resolve_servings("4—6") == 5
    assert resolve_servings("4 TO 6") == 5
    assert resolve_servings("Serves 3-4") == 4  # 3.5 redondea hacia arriba
    assert resolve_servings("6-8 people") == 7
    assert resolve_servings("4to6") == 5
    assert resolve_servings("4TO6") == 5
    assert resolve_servings("about 4to 6") == 5


def test_resolve_servings_numbers():
    assert resolve_servings(6) == 6
    assert resolve_servings(4.0) == 4
    assert resolve_servings(2.5) == 3
    assert resolve_servings(float("nan")) is None
    assert resolve_servings(True) is None


def test_resolve_servings_ambiguous_strings():
    assert resolve_servings("Serves 8") == 8
    assert resolve_servings("2 or 3") is None
    assert resolve_servings("") is None
    assert resolve_servings(["4"]) is None


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.49) == 2
    assert round_half_up(0) == 0
