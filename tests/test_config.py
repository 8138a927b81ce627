import pytest

from vision_chat.config import Settings, parse_key_list

KEY_VARS = [
    "VISION_API_KEYS",
    "VISION_API_KEY",
    "GOOGLE_CLOUD_VISION_API_KEY",
    "IMAGE_API_KEYS",
    "OPENAI_API_KEY",
]


@pytest.fixture
def clean_env(monkeypatch):
    for var in KEY_VARS:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


def make_settings(**kwargs) -> Settings:
    return Settings(_env_file=None, **kwargs)


def test_parse_key_list_separators():
    assert parse_key_list("a, b;c  d\n e") == ["a", "b", "c", "d", "e"]


def test_parse_key_list_dedupes_keeping_first():
    assert parse_key_list("a,b,a,c,b") == ["a", "b", "c"]


def test_parse_key_list_single_appended_only_if_missing():
    assert parse_key_list("a,b", "c") == ["a", "b", "c"]
    assert parse_key_list("a,b", "a") == ["a", "b"]


def test_parse_key_list_empty():
    assert parse_key_list("") == []
    assert parse_key_list(" ,; ") == []


def test_vision_keys_from_multi_variable(clean_env):
    clean_env.setenv("VISION_API_KEYS", "k1,k2;k3")
    assert make_settings().vision_key_list == ["k1", "k2", "k3"]


def test_vision_single_key_merged(clean_env):
    clean_env.setenv("VISION_API_KEYS", "k1,k2")
    clean_env.setenv("VISION_API_KEY", "k9")
    assert make_settings().vision_key_list == ["k1", "k2", "k9"]


def test_vision_single_key_already_listed(clean_env):
    clean_env.setenv("VISION_API_KEYS", "k1,k2")
    clean_env.setenv("VISION_API_KEY", "k2")
    assert make_settings().vision_key_list == ["k1", "k2"]


def test_vision_google_fallback_only(clean_env):
    clean_env.setenv("GOOGLE_CLOUD_VISION_API_KEY", "g1")
    assert make_settings().vision_key_list == ["g1"]


def test_vision_key_preferred_over_google_fallback(clean_env):
    clean_env.setenv("VISION_API_KEYS", "k1")
    clean_env.setenv("VISION_API_KEY", "k2")
    clean_env.setenv("GOOGLE_CLOUD_VISION_API_KEY", "g1")
    assert make_settings().vision_key_list == ["k1", "k2"]


def test_no_vision_keys(clean_env):
    assert make_settings().vision_key_list == []


def test_image_keys_merge_openai_key(clean_env):
    clean_env.setenv("IMAGE_API_KEYS", "i1 i2")
    clean_env.setenv("OPENAI_API_KEY", "o1")
    assert make_settings().image_key_list == ["i1", "i2", "o1"]
