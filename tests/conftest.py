"""
Pytest configuration and fixtures for storefront proxy tests.
"""
import os
import sys
import pytest

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

# Set testing environment before importing app
os.environ['FLASK_ENV'] = 'testing'

from storefront_proxy.app import create_app
from storefront_proxy.models import db, Tournament
from storefront_proxy.signature import compute_signature
from storefront_proxy.tournament_repository import TournamentRepository

CUSTOMER_ID = 'cust-1001'
OTHER_CUSTOMER_ID = 'cust-2002'


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app('testing')

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create database session for testing."""
    with app.app_context():
        # Clear all tables before each test
        db.session.remove()

        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        db.session.rollback()


@pytest.fixture
def repository():
    return TournamentRepository()


@pytest.fixture
def sample_tournament(app, db_session):
    """Create a sample tournament owned by CUSTOMER_ID, returned as a dict."""
    with app.app_context():
        tournament = Tournament(
            customer_id=CUSTOMER_ID,
            tournament_name='Regional Championship',
            tournament_date='2026-03-14',
            format='Standard',
            tournament_type='Regional',
            result='UNTOPPED',
            rounds=[],
            score={'wins': 0, 'losses': 0, 'ties': 0, 'text': '0-0-0'}
        )
        db.session.add(tournament)
        db.session.commit()

        db.session.refresh(tournament)
        return tournament.to_dict()


@pytest.fixture
def sample_rounds():
    """Two played rounds and a bye."""
    return [
        {
            'round_number': 1,
            'opponent_deck': {'p1': 25, 'p2': 150},
            'games': [
                {'game': 1, 'result': 'W', 'turn': 'FIRST'},
                {'game': 2, 'result': 'W', 'turn': 'SECOND'},
                {'game': 3, 'result': None, 'turn': None},
            ],
            'special': None,
        },
        {
            'round_number': 2,
            'opponent_deck': {'p1': None, 'p2': None},
            'games': [
                {'game': 1, 'result': 'L', 'turn': 'SECOND'},
                {'game': 2, 'result': 'W', 'turn': 'FIRST'},
                {'game': 3, 'result': 'L', 'turn': 'SECOND'},
            ],
            'special': None,
        },
        {
            'round_number': 3,
            'opponent_deck': {'p1': None, 'p2': None},
            'games': [
                {'game': 1, 'result': None, 'turn': None},
                {'game': 2, 'result': None, 'turn': None},
                {'game': 3, 'result': None, 'turn': None},
            ],
            'special': 'BYE',
        },
    ]


@pytest.fixture
def sign(app):
    """Return a function that adds a valid signature to request params."""
    def _sign(params: dict) -> dict:
        signed = dict(params)
        signed['signature'] = compute_signature(params, app.config['APP_PROXY_SECRET'])
        return signed
    return _sign


@pytest.fixture
def proxy(client, sign, db_session):
    """Call the signed action endpoint as CUSTOMER_ID and return the JSON body."""
    def _proxy(action: str, customer_id: str = CUSTOMER_ID, **params):
        query = {'action': action, 'logged_in_customer_id': customer_id, **params}
        response = client.get('/api/proxy', query_string=sign(query))
        assert response.status_code == 200
        return response.get_json()
    return _proxy
