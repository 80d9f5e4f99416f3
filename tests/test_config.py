from config import Settings

def test_defaults():
    settings = Settings.from_env({})
    assert settings == Settings()
    assert settings.database == ":memory:"
    assert settings.list_suffix == "_list"

def test_from_env_overrides():
    settings = Settings.from_env({
        "ROWSET_DATABASE": "demo.db",
        "ROWSET_PRIMARY_KEY": "pk",
        "ROWSET_FOREIGN_KEY_SUFFIX": "_fk",
        "ROWSET_LIST_SUFFIX": "_set",
        "ROWSET_LOG_LEVEL": "debug",
        "UNRELATED": "x",
    })
    assert settings.database == "demo.db"
    assert settings.primary_key == "pk"
    assert settings.foreign_key_suffix == "_fk"
    assert settings.list_suffix == "_set"
    assert settings.log_level == "DEBUG"
