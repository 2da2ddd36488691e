import os
import sys

import pytest
import torch

# Add project root to path to ensure imports work correctly
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from seq2seq_gen.domain.interfaces.model_executor import ModelSpec
from tests.helpers import START_TOKEN_ID, END_TOKEN_ID, scripted_forward


@pytest.fixture
def make_model_spec():
    """Build a ModelSpec around a forward mock."""

    def _make(forward, start_token_id: int = START_TOKEN_ID, end_token_id: int = END_TOKEN_ID) -> ModelSpec:
        return ModelSpec(forward=forward, start_token_id=start_token_id, end_token_id=end_token_id)

    return _make


@pytest.fixture
def never_ending_forward():
    """Forward mock that never produces the end token."""
    return scripted_forward([4, 5, 6, 7, 2, 3])


@pytest.fixture
def seeded_generator():
    return torch.Generator().manual_seed(1234)
