"""End-to-end tests, via requests to the application."""

import os
import shutil
import tempfile
from http import HTTPStatus as status
from unittest import TestCase, mock

from ..factory import create_web_app

QUESTION = '¿En qué ciudad naciste?'


class TestAccountJourney(TestCase):
    """Register, log in, recover a password and manage the account."""

    def setUp(self):
        self.db_path = tempfile.mkdtemp()
        self.cookie_name = 'test_council_session'
        environ = mock.patch.dict(os.environ, {
            'COUNCIL_DATABASE_URI': f'sqlite:///{self.db_path}/test.db',
            'CREATE_DB': '1',
            'BCRYPT_ROUNDS': '4',
            'JWT_SECRET': 'foosecret',
            'SESSION_DURATION': '500',
            'AUTH_SESSION_COOKIE_NAME': self.cookie_name,
            'AUTH_SESSION_COOKIE_SECURE': '0',
            'LOGLEVEL': 'DEBUG',
        })
        environ.start()
        self.addCleanup(environ.stop)

        self.app = create_web_app()
        self.client = self.app.test_client()

    def tearDown(self):
        self.app.config['DB_ENGINE'].dispose()
        shutil.rmtree(self.db_path)

    def register(self, **extra):
        form = {
            'username': 'maria.gestora',
            'password': 'clave123',
            'confirm_password': 'clave123',
            'security_question': QUESTION,
            'security_answer': 'Caracas',
        }
        form.update(extra)
        return self.client.post('/register', data=form)

    def login(self, password='clave123'):
        return self.client.post('/login', data={'username': 'maria.gestora',
                                                'password': password})

    def test_auth_status(self):
        """The app and its database are up."""
        response = self.client.get('/auth_status')
        self.assertEqual(response.status_code, status.OK)
        self.assertEqual(response.headers['X-Frame-Options'], 'DENY')

    def test_register(self):
        """A new administrator is created, but not logged in."""
        response = self.register()
        self.assertEqual(response.status_code, status.CREATED)
        self.assertEqual(response.json['username'], 'maria.gestora')
        self.assertEqual(response.json['role'], 'Admin')
        self.assertIsNone(self.client.get_cookie(self.cookie_name))

        again = self.register()
        self.assertEqual(again.status_code, status.CONFLICT)
        self.assertEqual(again.json['reason'], 'duplicate_username')

    def test_register_invalid(self):
        """Field errors are reported."""
        response = self.register(confirm_password='otra123')
        self.assertEqual(response.status_code, status.BAD_REQUEST)
        self.assertEqual(response.json['reason'], 'validation_error')
        self.assertIn('confirm_password', response.json['errors'])

    def test_login_logout(self):
        """Logging in sets the session cookie, logging out clears it."""
        self.register(council='Los Samanes')
        response = self.login()
        self.assertEqual(response.status_code, status.SEE_OTHER)
        self.assertEqual(response.headers['Location'], '/profile')
        cookie = self.client.get_cookie(self.cookie_name)
        self.assertIsNotNone(cookie)
        self.assertTrue(cookie.http_only)

        profile = self.client.get('/profile')
        self.assertEqual(profile.status_code, status.OK)
        self.assertEqual(profile.json['role_display'], 'Administrador')
        self.assertEqual(profile.json['council'], 'Los Samanes')

        response = self.client.get('/logout')
        self.assertEqual(response.status_code, status.SEE_OTHER)
        self.assertIsNone(self.client.get_cookie(self.cookie_name))
        self.assertEqual(self.client.get('/profile').status_code,
                         status.UNAUTHORIZED)

    def test_login_failed(self):
        """Bad credentials do not set a cookie."""
        self.register()
        response = self.login(password='clave124')
        self.assertEqual(response.status_code, status.BAD_REQUEST)
        self.assertEqual(response.json['reason'], 'auth_failed')
        self.assertIsNone(self.client.get_cookie(self.cookie_name))

    def test_forged_cookie(self):
        """A session cookie that we did not sign is ignored."""
        self.client.set_cookie(self.cookie_name, 'notatoken')
        self.assertEqual(self.client.get('/profile').status_code,
                         status.UNAUTHORIZED)

    def test_recovery(self):
        """A forgotten password is replaced using the security answer."""
        self.register()

        response = self.client.post('/recovery/question',
                                    data={'username': 'maria.gestora'})
        self.assertEqual(response.status_code, status.OK)
        self.assertEqual(response.json['question'], QUESTION)

        response = self.client.post('/recovery/reset', data={
            'username': 'maria.gestora',
            'answer': 'Valencia',
            'new_password': 'nuevaClave456',
        })
        self.assertEqual(response.status_code, status.BAD_REQUEST)
        self.assertEqual(response.json['reason'], 'answer_mismatch')

        response = self.client.post('/recovery/reset', data={
            'username': 'maria.gestora',
            'answer': '  CARACAS  ',
            'new_password': 'nuevaClave456',
        })
        self.assertEqual(response.status_code, status.OK)

        self.assertEqual(self.login().status_code, status.BAD_REQUEST)
        self.assertEqual(self.login('nuevaClave456').status_code,
                         status.SEE_OTHER)

    def test_recovery_unknown_user(self):
        """There is nobody to recover."""
        response = self.client.post('/recovery/question',
                                    data={'username': 'nadie'})
        self.assertEqual(response.status_code, status.NOT_FOUND)

    def test_change_password(self):
        """A logged-in user changes their password."""
        self.register()
        self.login()
        response = self.client.post('/profile/password', data={
            'current_password': 'clave123',
            'new_password': 'otraClave789',
            'confirm_password': 'otraClave789',
        })
        self.assertEqual(response.status_code, status.OK)
        self.client.get('/logout')
        self.assertEqual(self.login('otraClave789').status_code,
                         status.SEE_OTHER)

    def test_change_password_requires_session(self):
        """Anonymous users cannot change any password."""
        self.register()
        response = self.client.post('/profile/password', data={
            'current_password': 'clave123',
            'new_password': 'otraClave789',
            'confirm_password': 'otraClave789',
        })
        self.assertEqual(response.status_code, status.UNAUTHORIZED)

    def test_update_security(self):
        """A logged-in user changes their security question."""
        self.register()
        self.login()
        new_question = '¿Cuál es tu comida favorita?'
        response = self.client.post('/profile/security', data={
            'current_password': 'wrong1',
            'security_question': new_question,
            'security_answer': 'Arepas',
        })
        self.assertEqual(response.status_code, status.FORBIDDEN)

        response = self.client.post('/profile/security', data={
            'current_password': 'clave123',
            'security_question': new_question,
            'security_answer': 'Arepas',
        })
        self.assertEqual(response.status_code, status.OK)
        response = self.client.post('/recovery/question',
                                    data={'username': 'maria.gestora'})
        self.assertEqual(response.json['question'], new_question)
