# skatespot/api/users/test_user_service.py
"""
사용자 프로필/검색 테스트

사용법: python -m pytest skatespot/api/users/test_user_service.py -v
"""

import pytest

from skatespot.api.users.services import UserService
from skatespot.utils.profile_cache import ProfileCache


@pytest.fixture
def profile_cache():
    return ProfileCache()


@pytest.fixture
def user_service(fake_db, profile_cache):
    return UserService(profile_cache=profile_cache, search_limit=20)


@pytest.fixture
def skaters(seed_user):
    seed_user('me', 'John Doe', 'john@example.com', friends=[{'userId': 'joe', 'displayName': 'Joe Haskins'}])
    seed_user('joe', 'Joe Haskins', 'joe@example.com')
    seed_user('jolene', 'Jolene', 'jolene@example.com', friendRequests=[
        {'userId': 'me', 'displayName': 'John Doe', 'status': 'pending'}
    ])
    seed_user('bob', 'Bob', 'skater.bob@example.com')


def test_search_is_case_insensitive_prefix_match(user_service, skaters):
    results = user_service.search_users('me', 'jo')

    assert {r['id'] for r in results} == {'joe', 'jolene'}


def test_search_matches_later_words_and_email(user_service, skaters):
    assert [r['id'] for r in user_service.search_users('me', 'HAS')] == ['joe']
    assert [r['id'] for r in user_service.search_users('me', 'skater')] == ['bob']


def test_search_by_full_email_address(user_service, skaters):
    assert [r['id'] for r in user_service.search_users('me', 'joe@example.com')] == ['joe']
    assert [r['id'] for r in user_service.search_users('me', 'JOE@')] == ['joe']


def test_search_single_match_for_stranger(user_service, seed_user):
    seed_user('me', 'Me')
    seed_user('joe', 'Joe Haskins')
    seed_user('bob', 'Bob')

    results = user_service.search_users('me', 'jo')

    assert len(results) == 1
    assert results[0]['id'] == 'joe'
    assert results[0]['displayName'] == 'Joe Haskins'
    assert results[0]['isFriend'] is False
    assert results[0]['requestSent'] is False


def test_search_excludes_caller_and_reports_relationship(user_service, skaters):
    results = {r['id']: r for r in user_service.search_users('me', 'jo')}

    assert 'me' not in results
    assert results['joe']['isFriend'] is True
    assert results['joe']['requestSent'] is False
    assert results['jolene']['isFriend'] is False
    assert results['jolene']['requestSent'] is True


def test_search_with_blank_term_returns_nothing(fake_db, user_service, skaters):
    reads_before = fake_db.read_count
    assert user_service.search_users('me', '   ') == []
    assert fake_db.read_count == reads_before


def test_search_respects_limit(fake_db, seed_user):
    seed_user('me', 'Me')
    for i in range(5):
        seed_user(f'sam{i}', f'Sam {i}')
    service = UserService(profile_cache=ProfileCache(), search_limit=3)

    assert len(service.search_users('me', 'sam')) == 3


def test_get_or_create_profile_creates_missing_profile(fake_db, user_service):
    profile = user_service.get_or_create_profile('new-user', email='newbie@example.com')

    stored = fake_db.data('users', 'new-user')
    assert stored is not None
    assert stored['email'] == 'newbie@example.com'
    assert stored['friends'] == [] and stored['friendRequests'] == [] and stored['favoriteSpots'] == []
    assert 'newbie' in stored['searchPrefixes']
    assert profile['email'] == 'newbie@example.com'


def test_get_or_create_profile_keeps_existing_profile(fake_db, user_service, seed_user):
    seed_user('alice', 'Alice', 'alice@example.com', profilePhoto='https://cdn.example.com/a.png')

    profile = user_service.get_or_create_profile('alice', email='other@example.com')

    assert profile['email'] == 'alice@example.com'
    assert fake_db.data('users', 'alice')['profilePhoto'] == 'https://cdn.example.com/a.png'


def test_cached_profile_is_read_once_within_ttl(fake_db, user_service, seed_user):
    seed_user('alice', 'Alice')
    reads_before = fake_db.read_count

    first = user_service.fetch_user_profile_with_cache('alice')
    second = user_service.fetch_user_profile_with_cache('alice')

    assert first == second
    assert fake_db.read_count - reads_before == 1


def test_missing_profile_is_not_cached(fake_db, user_service):
    assert user_service.fetch_user_profile_with_cache('ghost') is None
    assert user_service.fetch_user_profile_with_cache('ghost') is None
    assert fake_db.reads.count(('users', 'ghost')) == 2


def test_public_profile_hides_private_fields(user_service, seed_user):
    seed_user('alice', 'Alice', 'alice@example.com',
              friends=[{'userId': 'bob', 'displayName': 'Bob'}], favoriteSpots=['spot-1', 'spot-2'])

    profile = user_service.get_public_profile('alice')

    assert profile == {
        'id': 'alice',
        'displayName': 'Alice',
        'profilePhoto': None,
        'friendCount': 1,
        'favoriteCount': 2,
    }
    assert user_service.get_public_profile('ghost') is None


def test_update_display_name_refreshes_search_index(fake_db, user_service, profile_cache, seed_user):
    seed_user('alice', 'Alice', 'alice@example.com')
    profile_cache.set('alice', {'displayName': 'Alice'})

    user_service.update_display_name('alice', 'Kickflip Kate')

    stored = fake_db.data('users', 'alice')
    assert stored['displayName'] == 'Kickflip Kate'
    assert 'kate' in stored['searchPrefixes']
    assert 'alice' in stored['searchPrefixes']
    assert profile_cache.get('alice') is None


def test_update_profile_photo(fake_db, user_service, seed_user):
    seed_user('alice', 'Alice')

    updated = user_service.update_profile_photo('alice', 'https://cdn.example.com/new.png')

    assert updated['profilePhoto'] == 'https://cdn.example.com/new.png'
    assert user_service.update_profile_photo('ghost', 'https://cdn.example.com/x.png') is None
