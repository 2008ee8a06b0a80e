import json

from tokfetch.config.settings_manager import DEFAULT_SETTINGS, apply_env_overrides, load_settings, merge_settings


def test_missing_file_returns_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv('PORT', raising=False)
    monkeypatch.delenv('HOST', raising=False)
    monkeypatch.delenv('TOKFETCH_LANGUAGE', raising=False)

    settings = load_settings(str(tmp_path / "settings.json"))

    assert settings == DEFAULT_SETTINGS
    assert settings is not DEFAULT_SETTINGS


def test_file_is_merged_over_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv('PORT', raising=False)
    monkeypatch.delenv('TOKFETCH_LANGUAGE', raising=False)
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({'server': {'port': 8080}, 'general': {'language': 'ar'}}), encoding='utf-8')

    settings = load_settings(str(path))

    assert settings['server']['port'] == 8080
    assert settings['server']['host'] == DEFAULT_SETTINGS['server']['host']
    assert settings['general']['language'] == 'ar'
    assert settings['general']['domain_markers'] == DEFAULT_SETTINGS['general']['domain_markers']
    assert settings['primary'] == DEFAULT_SETTINGS['primary']


def test_malformed_file_falls_back_to_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv('PORT', raising=False)
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding='utf-8')

    assert load_settings(str(path))['server']['port'] == DEFAULT_SETTINGS['server']['port']


def test_env_overrides():
    settings = apply_env_overrides(
        {'server': {'host': "0.0.0.0", 'port': 3000}, 'general': {'language': 'en'}},
        environ={'PORT': "5000", 'HOST': "127.0.0.1", 'TOKFETCH_LANGUAGE': "ar"},
    )
    assert settings['server'] == {'host': "127.0.0.1", 'port': 5000}
    assert settings['general']['language'] == 'ar'


def test_invalid_port_override_is_ignored():
    settings = apply_env_overrides({'server': {'port': 3000}}, environ={'PORT': "abc"})
    assert settings['server']['port'] == 3000



def test_nested_override_keeps_sibling_keys(tmp_path, monkeypatch):
    monkeypatch.delenv('PORT', raising=False)
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({'fallback': {'selectors': {'title': ["h2.caption"]}}}), encoding='utf-8')

    settings = load_settings(str(path))

    selectors = settings['fallback']['selectors']
    assert selectors['title'] == ["h2.caption"]
    assert selectors['author'] == DEFAULT_SETTINGS['fallback']['selectors']['author']
    assert selectors['thumbnail'] == DEFAULT_SETTINGS['fallback']['selectors']['thumbnail']
    assert settings['fallback']['navigation_timeout_ms'] == DEFAULT_SETTINGS['fallback']['navigation_timeout_ms']


def test_merge_settings_replaces_non_dict_values():
    base = {'a': {'b': {'c': 1, 'd': 2}, 'e': [1, 2]}, 'f': 1}

    merge_settings(base, {'a': {'b': {'c': 9}, 'e': [3]}, 'g': {'h': 1}})

    assert base == {'a': {'b': {'c': 9, 'd': 2}, 'e': [3]}, 'f': 1, 'g': {'h': 1}}


def test_non_object_file_falls_back_to_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv('PORT', raising=False)
    path = tmp_path / "settings.json"
    path.write_text("[1, 2]", encoding='utf-8')

    assert load_settings(str(path))['server']['port'] == DEFAULT_SETTINGS['server']['port']
