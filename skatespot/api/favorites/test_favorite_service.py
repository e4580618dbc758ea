# skatespot/api/favorites/test_favorite_service.py
import pytest

from skatespot.api.favorites.services import FavoriteService
from skatespot.utils.profile_cache import ProfileCache


@pytest.fixture
def profile_cache():
    return ProfileCache()


@pytest.fixture
def favorite_service(fake_db, profile_cache):
    return FavoriteService(profile_cache=profile_cache)


def _spot_ids(fake_db, user_id):
    return [f if isinstance(f, str) else f['spotId'] for f in fake_db.data('users', user_id)['favoriteSpots']]


def test_add_favourite_stores_spot_details(fake_db, favorite_service, seed_user):
    seed_user('alice', 'Alice')

    assert favorite_service.add_favourite_spot('alice', 'spot-1', 'Southbank', 'park') is True

    favorite = fake_db.data('users', 'alice')['favoriteSpots'][0]
    assert favorite['spotId'] == 'spot-1'
    assert favorite['spotName'] == 'Southbank'
    assert favorite['spotType'] == 'park'
    assert favorite['addedAt'] is not None


def test_adding_same_spot_twice_keeps_single_entry(fake_db, favorite_service, seed_user):
    seed_user('alice', 'Alice')

    favorite_service.add_favourite_spot('alice', 'spot-1', 'Southbank')
    assert favorite_service.add_favourite_spot('alice', 'spot-1', 'Southbank') is False

    assert _spot_ids(fake_db, 'alice') == ['spot-1']


def test_remove_favourite_removes_every_matching_entry(fake_db, favorite_service, seed_user):
    seed_user('alice', 'Alice', favoriteSpots=[
        {'spotId': 'spot-1', 'spotName': 'A'},
        'spot-1',
        {'spotId': 'spot-2', 'spotName': 'B'},
    ])

    assert favorite_service.remove_favourite_spot('alice', 'spot-1') is True
    assert _spot_ids(fake_db, 'alice') == ['spot-2']
    assert favorite_service.remove_favourite_spot('alice', 'spot-1') is False


def test_removed_spot_is_no_longer_favourited(favorite_service, seed_user):
    seed_user('alice', 'Alice')
    favorite_service.add_favourite_spot('alice', 'spot-1', 'Southbank')
    assert favorite_service.is_spot_favourited('alice', 'spot-1') is True

    favorite_service.remove_favourite_spot('alice', 'spot-1')

    assert favorite_service.is_spot_favourited('alice', 'spot-1') is False
    assert favorite_service.list_favourite_spots('alice') == []


def test_is_spot_favourited(favorite_service, seed_user):
    seed_user('alice', 'Alice', favoriteSpots=['legacy-spot'])

    favorite_service.add_favourite_spot('alice', 'spot-1')

    assert favorite_service.is_spot_favourited('alice', 'spot-1') is True
    assert favorite_service.is_spot_favourited('alice', 'legacy-spot') is True
    assert favorite_service.is_spot_favourited('alice', 'spot-9') is False
    assert favorite_service.is_spot_favourited('ghost', 'spot-1') is False


def test_list_favourites_normalizes_legacy_entries(favorite_service, seed_user):
    seed_user('alice', 'Alice', favoriteSpots=['legacy-spot', {'spotId': 'spot-1', 'spotName': 'Southbank'}])

    favorites = favorite_service.list_favourite_spots('alice')

    assert favorites[0] == {'spotId': 'legacy-spot', 'spotName': '', 'spotType': '', 'addedAt': None}
    assert favorites[1]['spotName'] == 'Southbank'


def test_favourite_changes_invalidate_cache(favorite_service, profile_cache, seed_user):
    seed_user('alice', 'Alice')
    profile_cache.set('alice', {'favoriteSpots': []})

    favorite_service.add_favourite_spot('alice', 'spot-1')

    assert profile_cache.get('alice') is None


def test_unknown_user_raises_lookup_error(favorite_service):
    with pytest.raises(LookupError):
        favorite_service.add_favourite_spot('ghost', 'spot-1')
    with pytest.raises(LookupError):
        favorite_service.list_favourite_spots('ghost')
