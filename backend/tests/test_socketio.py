def _events(client, name):
    return [pkt for pkt in client.get_received('/ws') if pkt['name'] == name]


def test_socket_connect_and_subscribe(sio_client):
    # Ensure we are connected to /ws
    if not sio_client.is_connected('/ws'):
        sio_client.connect(namespace='/ws')
    assert sio_client.is_connected('/ws')
    sio_client.get_received('/ws')

    sio_client.emit('subscribe', {'channel_id': 'room-1'}, namespace='/ws')
    received = sio_client.get_received('/ws')
    subscribed = [pkt for pkt in received if pkt['name'] == 'subscribed']
    assert subscribed
    assert subscribed[0]['args'][0]['room'] == 'channel:room-1'
    assert subscribed[0]['args'][0]['state'] is None


def test_subscribe_requires_channel(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('subscribe', {}, namespace='/ws')
    assert _events(sio_client, 'error')


def test_game_messages_reach_subscribers(sio_client):
    sio_client.emit('subscribe', {'channel_id': 'room-1'}, namespace='/ws')
    sio_client.get_received('/ws')

    sio_client.emit('create_session', {'channel_id': 'room-1', 'game': 'unscramble'}, namespace='/ws')
    received = sio_client.get_received('/ws')
    names = [pkt['name'] for pkt in received]
    assert 'session_created' in names
    messages = [pkt['args'][0]['text'] for pkt in received if pkt['name'] == 'session_message']
    assert any('Unscramble' in text for text in messages)

    sio_client.emit('join_session', {'channel_id': 'room-1', 'player_id': 'u1', 'name': 'Alice'}, namespace='/ws')
    received = sio_client.get_received('/ws')
    results = [pkt['args'][0]['result'] for pkt in received if pkt['name'] == 'join_result']
    assert results == ['joined']
    assert any(pkt['name'] == 'session_message' and 'Alice joined' in pkt['args'][0]['text'] for pkt in received)


def test_answer_and_force_end_over_socket(flask_app, sio_client, app_engine):
    sio_client.emit('subscribe', {'channel_id': 'room-2'}, namespace='/ws')
    sio_client.emit('create_session', {'channel_id': 'room-2', 'game': 'unscramble'}, namespace='/ws')
    sio_client.emit('join_session', {'channel_id': 'room-2', 'player_id': 'u1'}, namespace='/ws')
    app_engine.clock.advance(flask_app.config['JOIN_DURATION_SEC'])
    sio_client.get_received('/ws')

    target = app_engine.registry.get('room-2').payload.target
    sio_client.emit('submit_answer', {'channel_id': 'room-2', 'player_id': 'u1', 'text': target,
                                      'message_ref': 'msg-9'}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert [pkt['args'][0]['result'] for pkt in received if pkt['name'] == 'answer_result'] == ['accepted']
    assert any(pkt['name'] == 'reaction' and pkt['args'][0]['emoji'] == '✅' for pkt in received)

    sio_client.emit('force_end', {'channel_id': 'room-2'}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert [pkt['args'][0]['ended'] for pkt in received if pkt['name'] == 'force_end_result'] == [True]
    assert any(pkt['name'] == 'session_message' and 'Game over' in pkt['args'][0]['text'] for pkt in received)


class _BrokenSocketIO:
    def emit(self, *args, **kwargs):
        raise RuntimeError('transport down')


class _RecordingSocketIO:
    def __init__(self):
        self.emitted = []

    def emit(self, event, payload, to=None, namespace=None):
        self.emitted.append((event, payload, to, namespace))


def test_notifier_targets_channel_room():
    from wordplay.services.sessions.notify import SocketIONotifier
    fake = _RecordingSocketIO()
    notifier = SocketIONotifier(fake)
    assert notifier.send_text('c1', 'hello', ['u1']) is True
    assert notifier.send_reaction('c1', None, '✅') is False
    assert fake.emitted == [('session_message', {'channel_id': 'c1', 'text': 'hello', 'mentions': ['u1']}, 'channel:c1', '/ws')]


def test_notifier_swallows_delivery_failures():
    from wordplay.services.sessions.notify import SocketIONotifier
    notifier = SocketIONotifier(_BrokenSocketIO())
    assert notifier.send_text('c1', 'hello') is False
    assert notifier.send_state('c1', {'phase': 'joining'}) is False
