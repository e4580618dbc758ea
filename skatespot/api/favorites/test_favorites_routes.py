# skatespot/api/favorites/test_favorites_routes.py
from skatespot.services.spot_api_client import SpotApiError


class StubSpotApi:
    def __init__(self, spot=None, error=None):
        self.spot = spot
        self.error = error
        self.requested = []

    def get_spot(self, spot_id):
        self.requested.append(spot_id)
        if self.error:
            raise self.error
        return self.spot


def test_add_favourite_resolves_spot_name(app, client, auth_headers, seed_user, fake_db):
    seed_user('alice', 'Alice')
    stub = StubSpotApi(spot={'id': 'spot-1', 'name': 'Southbank', 'type': 'park'})
    app.services['spot_api'] = stub

    response = client.post('/api/favorites', json={'spotId': 'spot-1'}, headers=auth_headers('alice'))

    assert response.status_code == 201
    assert stub.requested == ['spot-1']
    favorite = fake_db.data('users', 'alice')['favoriteSpots'][0]
    assert favorite['spotName'] == 'Southbank'
    assert favorite['spotType'] == 'park'


def test_add_favourite_when_spot_api_is_down(app, client, auth_headers, seed_user, fake_db):
    seed_user('alice', 'Alice')
    app.services['spot_api'] = StubSpotApi(error=SpotApiError("down", status_code=503))

    response = client.post('/api/favorites', json={'spotId': 'spot-1'}, headers=auth_headers('alice'))

    assert response.status_code == 201
    assert fake_db.data('users', 'alice')['favoriteSpots'][0]['spotName'] == ''


def test_favourite_toggle_over_http(app, client, auth_headers, seed_user):
    seed_user('alice', 'Alice')
    stub = StubSpotApi()
    app.services['spot_api'] = stub
    body = {'spotId': 'spot-1', 'spotName': 'Southbank', 'spotType': 'park'}

    assert client.post('/api/favorites', json=body, headers=auth_headers('alice')).status_code == 201
    assert client.post('/api/favorites', json=body, headers=auth_headers('alice')).status_code == 200
    assert stub.requested == []

    status = client.get('/api/favorites/spot-1', headers=auth_headers('alice')).get_json()
    assert status == {'spotId': 'spot-1', 'isFavourited': True}

    listed = client.get('/api/favorites', headers=auth_headers('alice')).get_json()['favoriteSpots']
    assert [f['spotId'] for f in listed] == ['spot-1']

    response = client.delete('/api/favorites/spot-1', headers=auth_headers('alice'))
    assert response.status_code == 200
    assert response.get_json()['removed'] is True
    assert client.get('/api/favorites/spot-1', headers=auth_headers('alice')).get_json()['isFavourited'] is False


def test_add_favourite_requires_spot_id(client, auth_headers, seed_user):
    seed_user('alice', 'Alice')

    response = client.post('/api/favorites', json={}, headers=auth_headers('alice'))

    assert response.status_code == 400
    assert response.get_json()['error_code'] == 'VALIDATION_ERROR'
