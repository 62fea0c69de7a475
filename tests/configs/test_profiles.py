import pytest

from settle._cogs.configs.profiles import ProfileError, load_profile


def test_flat_profile(tmp_path):
    path = tmp_path / 'profile.yaml'
    path.write_text(
        "server: https://api.example.com\n"
        "items-key: FileSystems\n"
        "pending: [CREATING, UPDATING]\n"
        "target: AVAILABLE\n"
        "timeout: 2700\n"
    )
    profile = load_profile(str(path))
    assert profile == {
        'server': 'https://api.example.com',
        'items_key': 'FileSystems',
        'pending': ['CREATING', 'UPDATING'],
        'target': ['AVAILABLE'],
        'timeout': 2700,
    }


def test_sectioned_profile(tmp_path):
    path = tmp_path / 'profiles.yaml'
    path.write_text(
        "file-systems:\n"
        "  path: /file-systems\n"
        "vpn-endpoints:\n"
        "  path: /client-vpn-endpoints\n"
    )
    profile = load_profile(str(path), section='vpn-endpoints')
    assert profile == {'path': '/client-vpn-endpoints'}


def test_empty_profile(tmp_path):
    path = tmp_path / 'profile.yaml'
    path.write_text("")
    assert load_profile(str(path)) == {}


def test_absent_section(tmp_path):
    path = tmp_path / 'profiles.yaml'
    path.write_text("file-systems:\n  path: /file-systems\n")
    with pytest.raises(ProfileError, match=r"No profile section 'other'"):
        load_profile(str(path), section='other')


@pytest.mark.parametrize('content', [
    pytest.param("- a\n- b\n", id='list'),
    pytest.param("just text\n", id='scalar'),
    pytest.param("1: one\n", id='non-string-keys'),
])
def test_malformed_profiles(tmp_path, content):
    path = tmp_path / 'profile.yaml'
    path.write_text(content)
    with pytest.raises(ProfileError):
        load_profile(str(path))


def test_absent_file(tmp_path):
    with pytest.raises(OSError):
        load_profile(str(tmp_path / 'absent.yaml'))
