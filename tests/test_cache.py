from cf_ddns.cache import cache_file, load_cached_ip, store_ip


def test_cache_miss_when_absent(tmp_path):
    assert load_cached_ip("home.example.com", "A", tmp_path) is None

def test_store_then_load_per_record_type(tmp_path):
    assert store_ip("home.example.com", "A", "8.8.8.8", tmp_path) is True
    assert store_ip("home.example.com", "AAAA", "2001:db8::1", tmp_path) is True

    assert load_cached_ip("home.example.com", "A", tmp_path) == "8.8.8.8"
    assert load_cached_ip("home.example.com", "AAAA", tmp_path) == "2001:db8::1"
    # Plain value, one file per pair
    assert cache_file("home.example.com", "A", tmp_path).read_text() == "8.8.8.8\n"

def test_empty_cache_file_is_a_miss(tmp_path):
    cache_file("home.example.com", "A", tmp_path).write_text("")

    assert load_cached_ip("home.example.com", "A", tmp_path) is None

def test_store_creates_cache_dir(tmp_path):
    cache_dir = tmp_path / "nested" / "cache"

    assert store_ip("home.example.com", "A", "8.8.8.8", cache_dir) is True
    assert load_cached_ip("home.example.com", "A", cache_dir) == "8.8.8.8"

def test_store_failure_returns_false(tmp_path):
    # A regular file where the cache directory should be
    blocker = tmp_path / "blocker"
    blocker.write_text("")

    assert store_ip("home.example.com", "A", "8.8.8.8", blocker) is False
