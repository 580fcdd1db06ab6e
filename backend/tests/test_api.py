from conftest import become_host, join


def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert 'message' in res.get_json()


def test_state_starts_in_lobby(client):
    res = client.get('/api/session/state')
    assert res.status_code == 200
    state = res.get_json()
    assert state['phase'] == 'lobby'
    assert state['players'] == []
    assert state['voteCount'] == {'current': 0, 'total': 0}


def test_state_reflects_socket_activity(flask_app, client, sio_factory):
    host = sio_factory(flask_app)
    become_host(host)
    ana = sio_factory(flask_app)
    beto = sio_factory(flask_app)
    join(ana, 'Ana')
    beto_id = join(beto, 'Beto')
    host.emit('start-game', 'Who sings loudest?')
    ana.emit('submit-vote', beto_id)

    state = client.get('/api/session/state').get_json()
    assert state['phase'] == 'voting'
    assert state['currentQuestion'] == 'Who sings loudest?'
    assert [p['name'] for p in state['players']] == ['Ana', 'Beto']
    assert state['votes'] == [{'voterId': state['players'][0]['id'], 'targetId': beto_id}]

    host.emit('show-results')
    state = client.get('/api/session/state').get_json()
    assert state['phase'] == 'results'
    assert state['results'][0] == {'playerId': beto_id, 'playerName': 'Beto', 'voteCount': 1}


def test_public_url(client):
    res = client.get('/api/session/public-url')
    assert res.get_json() == {'url': 'http://party.test:3000'}


def test_health(client):
    data = client.get('/api/session/health').get_json()
    assert data == {'status': 'ok', 'phase': 'lobby', 'players': 0}


def test_public_url_cli(flask_app):
    result = flask_app.test_cli_runner().invoke(args=['public-url'])
    assert result.exit_code == 0
    assert result.output.strip() == 'http://party.test:3000'
