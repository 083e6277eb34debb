from schedule_import import config


def test_defaults_are_sane():
    assert config.ROW_Y_TOLERANCE > 0
    assert config.COLUMN_SEPARATOR == "\t"
    assert len(config.CLASS_COLORS) == len(set(config.CLASS_COLORS))


def test_missing_user_config(tmp_path):
    assert config.load_user_config(tmp_path / "none.json") == {}


def test_user_config_round_trip(tmp_path):
    path = tmp_path / "gui.json"
    config.save_user_config({"monday": "2026-01-12", "weeks": 15}, path)
    assert config.load_user_config(path) == {"monday": "2026-01-12", "weeks": 15}


def test_corrupt_user_config(tmp_path):
    path = tmp_path / "gui.json"
    path.write_text("{not json", encoding="utf-8")
    assert config.load_user_config(path) == {}
    path.write_text("[1, 2]", encoding="utf-8")
    assert config.load_user_config(path) == {}
