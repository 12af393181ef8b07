"""
Unit tests for core.models module.
"""
import dataclasses

import pytest
from core.models import BoundingBox, PricingPlan, TextRegion, User, WorkflowState


class TestBoundingBox:
    """Tests for BoundingBox dataclass."""

    def test_width_and_height(self):
        """Test extent properties."""
        box = BoundingBox(ymin=100, xmin=200, ymax=400, xmax=800)

        assert box.width == 600
        assert box.height == 300
        assert box.is_well_formed

    def test_degenerate_box_is_kept(self):
        """Test inverted boxes are representable but flagged."""
        box = BoundingBox(ymin=500, xmin=500, ymax=100, xmax=100)

        assert not box.is_well_formed
        assert box.width == -400

    def test_from_dict_coerces_numbers(self):
        """Test numeric strings from the detector are accepted."""
        box = BoundingBox.from_dict({'ymin': '10', 'xmin': 20, 'ymax': 30.5, 'xmax': 40})

        assert box == BoundingBox(10.0, 20.0, 30.5, 40.0)

    def test_from_dict_missing_edge(self):
        """Test missing edges raise KeyError."""
        with pytest.raises(KeyError):
            BoundingBox.from_dict({'ymin': 1, 'xmin': 2, 'ymax': 3})

    def test_to_dict(self):
        """Test conversion to dictionary."""
        box = BoundingBox(ymin=1, xmin=2, ymax=3, xmax=4)

        assert box.to_dict() == {'ymin': 1, 'xmin': 2, 'ymax': 3, 'xmax': 4}


class TestTextRegion:
    """Tests for TextRegion dataclass."""

    def test_defaults(self):
        """Test optional fields default sensibly."""
        region = TextRegion(id='r1', box=BoundingBox(0, 0, 10, 10), order=1)

        assert region.is_active is True
        assert region.description == ""
        assert region.extracted_text is None

    def test_regions_are_immutable(self):
        """Test region values cannot be changed in place."""
        region = TextRegion(id='r1', box=BoundingBox(0, 0, 10, 10), order=1)

        with pytest.raises(dataclasses.FrozenInstanceError):
            region.order = 2

    def test_with_order_keeps_identity(self):
        """Test reordering returns a new value with the same id."""
        region = TextRegion(id='r1', box=BoundingBox(0, 0, 10, 10), order=1, is_active=False)
        moved = region.with_order(3)

        assert moved.id == 'r1'
        assert moved.order == 3
        assert moved.is_active is False
        assert region.order == 1

    def test_toggled(self):
        """Test toggling flips only the active flag."""
        region = TextRegion(id='r1', box=BoundingBox(0, 0, 10, 10), order=4)
        toggled = region.toggled()

        assert toggled.is_active is False
        assert toggled.order == 4
        assert toggled.toggled().is_active is True

    def test_to_dict_camel_case(self):
        """Test wire format uses camelCase and omits absent text."""
        region = TextRegion(id='r1', box=BoundingBox(1, 2, 3, 4), order=1, description='Title')
        data = region.to_dict()

        assert data == {
            'id': 'r1',
            'box': {'ymin': 1, 'xmin': 2, 'ymax': 3, 'xmax': 4},
            'order': 1,
            'description': 'Title',
            'isActive': True
        }

    def test_to_dict_includes_extracted_text(self):
        """Test extracted text is serialized when present."""
        region = TextRegion(id='r1', box=BoundingBox(1, 2, 3, 4), order=1, extracted_text='hi')

        assert region.to_dict()['extractedText'] == 'hi'

    def test_from_dict_defaults(self):
        """Test missing order and isActive fall back to position and True."""
        region = TextRegion.from_dict(
            {'id': 7, 'box': {'ymin': 0, 'xmin': 0, 'ymax': 5, 'xmax': 5}},
            position=4
        )

        assert region.id == '7'
        assert region.order == 4
        assert region.is_active is True
        assert region.description == ""

    def test_from_dict_reads_all_fields(self):
        """Test a full detector entry."""
        region = TextRegion.from_dict({
            'id': 'r2',
            'box': {'ymin': 0, 'xmin': 0, 'ymax': 5, 'xmax': 5},
            'order': 2,
            'description': 'Caption',
            'isActive': False
        })

        assert region.order == 2
        assert region.description == 'Caption'
        assert region.is_active is False

    def test_from_dict_missing_box(self):
        """Test malformed entries raise."""
        with pytest.raises(KeyError):
            TextRegion.from_dict({'id': 'r1'})


class TestUser:
    """Tests for User dataclass."""

    def test_round_trip_keys(self):
        """Test camelCase keys in both directions."""
        user = User.from_dict({'id': 'u1', 'email': 'a@b.c', 'credits': 5, 'isPro': True})

        assert user.credits == 5
        assert user.is_pro is True
        assert user.to_dict() == {'id': 'u1', 'email': 'a@b.c', 'credits': 5, 'isPro': True}

    def test_from_dict_defaults(self):
        """Test missing credits and isPro."""
        user = User.from_dict({'id': 'u1', 'email': 'a@b.c'})

        assert user.credits == 0
        assert user.is_pro is False


class TestWorkflowState:
    """Tests for WorkflowState enum."""

    def test_values_are_names(self):
        """Test state values serialize as their names."""
        assert WorkflowState.DETECTING_REGIONS.value == 'DETECTING_REGIONS'
        assert WorkflowState('FINISHED') is WorkflowState.FINISHED
        assert len(WorkflowState) == 6


class TestPricingPlan:
    """Tests for PricingPlan dataclass."""

    def test_to_dict(self):
        plan = PricingPlan(id='x', name='X', price='$1', credits=2)

        assert plan.to_dict() == {
            'id': 'x', 'name': 'X', 'price': '$1', 'credits': 2, 'popular': False
        }
