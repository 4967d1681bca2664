"""
Pytest configuration: local imports and shared label fixtures.
"""

# Standard Library
import os
import sys

# PIP3 modules
import pytest


#============================================
def _ensure_repo_on_path() -> None:
	"""
	Ensure the repository root is on sys.path.
	"""
	repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
	if repo_root not in sys.path:
		sys.path.insert(0, repo_root)


_ensure_repo_on_path()


#============================================
@pytest.fixture
def registry():
	"""
	Fresh registry of the shipped cable layouts.
	"""
	import cable_label_layout.cable_schemas
	return cable_label_layout.cable_schemas.build_cable_registry()


#============================================
@pytest.fixture
def full_row() -> dict[str, str]:
	return {
		"aSide": "Switch-A",
		"portA": "1/0/1",
		"zSide": "Switch-B",
		"portB": "1/0/2",
		"lineId": "LINE-001",
	}
