"""
Page server: login flow, key-gated pages, public static assets
"""

import pytest
import socketio
from fastapi.testclient import TestClient

from src.overlay import create_asgi_app
from src.overlay.server import PROTECTED_PAGES
from tests.util_constant import TEST_KEY


PAGES = sorted(PROTECTED_PAGES)


def test_root_redirects_to_login(client):
    response = client.get('/', follow_redirects=False)

    assert response.status_code == 302
    assert response.headers['location'] == '/auth'


def test_login_page_is_public(client):
    response = client.get('/auth')

    assert response.status_code == 200
    assert 'name="key"' in response.text


class TestLoginSubmit:
    def test_correct_key_redirects_with_key_in_query(self, client):
        response = client.post('/auth', data={'key': TEST_KEY}, follow_redirects=False)

        assert response.status_code == 302
        assert response.headers['location'] == f'/rematch-overlay?key={TEST_KEY}'

    @pytest.mark.parametrize('form', [{'key': 'wrong'}, {'key': ''}, {}])
    def test_wrong_key_redirects_with_error_flag(self, client, form):
        response = client.post('/auth', data=form, follow_redirects=False)

        assert response.status_code == 302
        assert response.headers['location'] == '/auth?error=1'

    def test_login_then_follow_lands_on_overlay(self, client):
        response = client.post('/auth', data={'key': TEST_KEY})

        assert response.status_code == 200
        assert 'Scoreboard.render' in response.text


class TestProtectedPages:
    @pytest.mark.parametrize('path', PAGES)
    def test_query_key_serves_page(self, client, path):
        response = client.get(f'{path}?key={TEST_KEY}')

        assert response.status_code == 200
        assert response.headers['content-type'].startswith('text/html')
        assert 'socket.io' in response.text

    @pytest.mark.parametrize('path', PAGES)
    def test_form_key_serves_page(self, client, path):
        response = client.request('GET', path, data={'key': TEST_KEY})

        assert response.status_code == 200

    @pytest.mark.parametrize('path', PAGES)
    def test_empty_query_key_falls_back_to_form(self, client, path):
        response = client.request('GET', f'{path}?key=', data={'key': TEST_KEY}, follow_redirects=False)

        assert response.status_code == 200

    def test_query_key_wins_over_form(self, client):
        response = client.request(
            'GET', '/finals-control?key=wrong', data={'key': TEST_KEY}, follow_redirects=False
        )

        assert response.status_code == 302
        assert response.headers['location'] == '/auth'

    @pytest.mark.parametrize('path', PAGES)
    @pytest.mark.parametrize('query', ['?key=wrong', '?key=', ''])
    def test_bad_or_missing_key_redirects_to_login(self, client, path, query):
        response = client.get(f'{path}{query}', follow_redirects=False)

        assert response.status_code == 302
        assert response.headers['location'] == '/auth'

    def test_control_and_overlay_pages_differ(self, client):
        control = client.get(f'/finals-control?key={TEST_KEY}').text
        overlay = client.get(f'/finals-overlay?key={TEST_KEY}').text

        assert 'update' in control.lower()
        assert 'Scoreboard.render' in overlay
        assert control != overlay


def test_static_assets_need_no_key(client):
    response = client.get('/source/overlay.css')

    assert response.status_code == 200
    assert 'color: red' in response.text


def test_missing_static_dir_disables_mount(app_state, tmp_path):
    from src.overlay import create_app

    client = TestClient(create_app(app_state, static_dir=tmp_path / 'nope'))

    assert client.get('/source/overlay.css').status_code == 404


def test_combined_asgi_app_serves_pages(app_state, static_dir):
    app = create_asgi_app(app_state, static_dir=static_dir)

    assert isinstance(app, socketio.ASGIApp)
    client = TestClient(app)
    assert client.get(f'/finals-control?key={TEST_KEY}').status_code == 200
    assert client.get('/finals-control?key=wrong', follow_redirects=False).status_code == 302
