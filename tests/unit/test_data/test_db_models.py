"""
Unit tests for data.db_models module.
"""
from data.db_models import UserRecord, generate_token


class TestUserRecord:
    """Tests for UserRecord model."""

    def test_create_record(self, test_db_session):
        """Test creating a record with an explicit token."""
        record = UserRecord(
            session_token="tok-create",
            user_id="u1",
            email="a@example.com",
            credits=4
        )

        test_db_session.add(record)
        test_db_session.commit()

        loaded = test_db_session.get(UserRecord, "tok-create")
        assert loaded.email == "a@example.com"
        assert loaded.credits == 4
        assert loaded.is_pro is False

    def test_token_generated_by_default(self, test_db_session):
        """Test a token is assigned when none is given."""
        record = UserRecord(user_id="u2", email="b@example.com")

        test_db_session.add(record)
        test_db_session.commit()

        assert record.session_token
        assert len(record.session_token) == 32

    def test_timestamps(self, test_db_session):
        """Test created_at and updated_at are set."""
        record = UserRecord(session_token="tok-ts", user_id="u3", email="c@example.com")

        test_db_session.add(record)
        test_db_session.commit()

        assert record.created_at is not None
        assert record.updated_at is not None

    def test_to_dict(self):
        """Test camelCase user view."""
        record = UserRecord(
            session_token="t", user_id="u1", email="a@example.com", credits=2, is_pro=True
        )

        assert record.to_dict() == {
            'id': 'u1', 'email': 'a@example.com', 'credits': 2, 'isPro': True
        }


class TestGenerateToken:
    """Tests for token generation."""

    def test_tokens_unique(self):
        tokens = {generate_token() for _ in range(50)}

        assert len(tokens) == 50
