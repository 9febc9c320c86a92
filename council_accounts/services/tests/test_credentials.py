"""Tests for :mod:`council_accounts.services.credentials`."""

import shutil
import tempfile
from unittest import TestCase, mock

from sqlalchemy.exc import OperationalError

from ... import domain
from .. import credentials
from ..exceptions import DuplicateUsername, NoSuchUser, Unavailable
from .util import temporary_db


class SetUpUserMixin(object):
    """Mixin for creating a test user in a temporary database."""

    def setUp(self):
        """Set up the database."""
        self.db_path = tempfile.mkdtemp()
        self.db_uri = f'sqlite:///{self.db_path}/test.db'
        self.username = 'foouser'
        with temporary_db(self.db_uri, drop=False) as store:
            self.user = store.insert(domain.User(
                username=self.username,
                password_hash='$2b$04$notarealhashnotarealhashnotarealhashnotarealhas',
                security_question=domain.SECURITY_QUESTIONS[1],
                security_answer_hash='$2b$04$answerhashansweranswerhashansweranswerhashanswe'
            ))

    def tearDown(self):
        shutil.rmtree(self.db_path)


class TestFindUser(SetUpUserMixin, TestCase):
    """Tests for :meth:`.CredentialStore.find_by_username` and friends."""

    def test_find_existing_user(self):
        """There is a user with the passed username."""
        with temporary_db(self.db_uri, create=False, drop=False) as store:
            user = store.find_by_username(self.username)
        self.assertIsNotNone(user)
        self.assertEqual(user.user_id, self.user.user_id)
        self.assertEqual(user.role, domain.ADMIN)
        self.assertEqual(user.security_question, domain.SECURITY_QUESTIONS[1])

    def test_username_is_case_sensitive(self):
        """Lookup does not fold case."""
        with temporary_db(self.db_uri, create=False, drop=False) as store:
            self.assertIsNone(store.find_by_username('FOOUSER'))

    def test_username_is_not_trimmed(self):
        """Lookup does not strip whitespace."""
        with temporary_db(self.db_uri, create=False, drop=False) as store:
            self.assertIsNone(store.find_by_username(' foouser '))

    def test_find_by_id(self):
        """Users can be retrieved by primary key."""
        with temporary_db(self.db_uri, create=False, drop=False) as store:
            user = store.find_by_id(self.user.user_id)
            self.assertEqual(user.username, self.username)
            self.assertIsNone(store.find_by_id('nope'))


class TestInsert(SetUpUserMixin, TestCase):
    """Tests for :meth:`.CredentialStore.insert`."""

    def test_insert_new_user(self):
        """A new user gets an id and a creation time."""
        with temporary_db(self.db_uri, create=False, drop=False) as store:
            user = store.insert(domain.User(username='baruser',
                                             password_hash='x'))
            self.assertIsNotNone(user.user_id)
            self.assertIsNotNone(user.created_at)
            self.assertEqual(store.find_by_username('baruser').user_id,
                             user.user_id)

    def test_new_user_defaults(self):
        """Security answer defaults to unconfigured."""
        with temporary_db(self.db_uri, create=False, drop=False) as store:
            user = store.insert(domain.User(username='baruser',
                                             password_hash='x'))
            loaded = store.find_by_id(user.user_id)
        self.assertEqual(loaded.security_question,
                         domain.DEFAULT_SECURITY_QUESTION)
        self.assertEqual(loaded.security_answer_hash, '')
        self.assertFalse(loaded.security_configured)

    def test_insert_duplicate_username(self):
        """An account with the same username exists."""
        with temporary_db(self.db_uri, create=False, drop=False) as store:
            with self.assertRaises(DuplicateUsername):
                store.insert(domain.User(username=self.username,
                                         password_hash='x'))

    def test_concurrent_registration(self):
        """The uniqueness constraint catches a username taken meanwhile."""
        with temporary_db(self.db_uri, create=False, drop=False) as store:
            existing = store.find_by_username(self.username)
            with mock.patch.object(store, 'find_by_username',
                                   side_effect=[None, existing]):
                with self.assertRaises(DuplicateUsername):
                    store.insert(domain.User(username=self.username,
                                             password_hash='x'))


class TestUpdates(SetUpUserMixin, TestCase):
    """Tests for password and security question updates."""

    def test_update_password_hash(self):
        """Only the password hash changes."""
        with temporary_db(self.db_uri, create=False, drop=False) as store:
            store.update_password_hash(self.user.user_id, 'newhash')
            user = store.find_by_id(self.user.user_id)
        self.assertEqual(user.password_hash, 'newhash')
        self.assertEqual(user.security_answer_hash,
                         self.user.security_answer_hash)
        self.assertEqual(user.security_question, self.user.security_question)

    def test_update_password_hash_no_such_user(self):
        """The user does not exist."""
        with temporary_db(self.db_uri, create=False, drop=False) as store:
            with self.assertRaises(NoSuchUser):
                store.update_password_hash('nope', 'newhash')

    def test_update_security_qa(self):
        """Question and answer hash change together."""
        with temporary_db(self.db_uri, create=False, drop=False) as store:
            store.update_security_qa(self.user.user_id,
                                     domain.SECURITY_QUESTIONS[4], 'newanswer')
            user = store.find_by_id(self.user.user_id)
        self.assertEqual(user.security_question, domain.SECURITY_QUESTIONS[4])
        self.assertEqual(user.security_answer_hash, 'newanswer')
        self.assertEqual(user.password_hash, self.user.password_hash)

    def test_update_security_qa_no_such_user(self):
        """The user does not exist."""
        with temporary_db(self.db_uri, create=False, drop=False) as store:
            with self.assertRaises(NoSuchUser):
                store.update_security_qa('nope', domain.SECURITY_QUESTIONS[4],
                                         'newanswer')

    def test_update_security_qa_failed_commit(self):
        """When the commit fails, neither column is changed."""
        error = OperationalError('UPDATE usuarios', {},
                                 Exception('disk I/O error'))
        with temporary_db(self.db_uri, create=False, drop=False) as store:
            with mock.patch('sqlalchemy.orm.Session.commit',
                            side_effect=error):
                with self.assertRaises(Unavailable):
                    store.update_security_qa(self.user.user_id,
                                             domain.SECURITY_QUESTIONS[4],
                                             'newanswer')
            user = store.find_by_id(self.user.user_id)
        self.assertEqual(user.security_question, self.user.security_question)
        self.assertEqual(user.security_answer_hash,
                         self.user.security_answer_hash)


class TestAvailability(TestCase):
    """Tests for :meth:`.CredentialStore.is_available`."""

    def test_available(self):
        """The database can be queried."""
        with temporary_db() as store:
            self.assertTrue(store.is_available())

    def test_unavailable(self):
        """The database cannot be queried."""
        with temporary_db() as store:
            with mock.patch.object(credentials.CredentialStore, 'transaction',
                                   side_effect=Unavailable('nope')):
                self.assertFalse(store.is_available())
