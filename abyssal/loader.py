"""
Data pack loader with schema validation.

Loads grid metadata, tabular world sources, mission definitions, biome
facts and session configuration, and validates structured documents
against JSON schemas. Any failure here is fatal to session start.
"""

import yaml
import json
from pathlib import Path
from typing import Any, Dict, List, Optional
import jsonschema

from .data_types import (
    GridMetadata, Mission, MissionNarration, MissionType, SessionConfig
)
from .records import parse_records
from .constants import (
    METADATA_FILE,
    SESSION_FILE,
    MISSIONS_FILE,
    FACTS_FILE,
    CSV_SOURCES,
)


class DataLoadError(Exception):
    """Raised when data loading or validation fails"""
    pass


def load_yaml(file_path: Path) -> Any:
    """Load YAML file and return parsed data"""
    if not file_path.exists():
        raise DataLoadError(f"File not found: {file_path}")

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise DataLoadError(f"YAML parse error in {file_path}: {e}") from e


def load_json(file_path: Path) -> Any:
    """Load JSON file and return parsed data"""
    if not file_path.exists():
        raise DataLoadError(f"File not found: {file_path}")

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise DataLoadError(f"JSON parse error in {file_path}: {e}") from e


def load_csv(file_path: Path) -> List[Dict[str, Any]]:
    """Read a tabular source and parse it into records"""
    file_path = Path(file_path)
    if not file_path.exists():
        raise DataLoadError(f"File not found: {file_path}")

    try:
        text = file_path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise DataLoadError(f"Failed to read {file_path}: {e}") from e

    return parse_records(text)


def validate_against_schema(data: Any, schema_path: Path, data_path: Path):
    """Validate data against JSON schema"""
    if not schema_path.exists():
        # Schema validation is optional per document
        return

    try:
        with open(schema_path, 'r', encoding='utf-8') as f:
            schema = json.load(f)
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as e:
        raise DataLoadError(f"Validation error in {data_path}: {e.message}") from e
    except json.JSONDecodeError as e:
        raise DataLoadError(f"Invalid JSON schema {schema_path}: {e}") from e


def _require_mapping(data: Any, file_path: Path) -> dict:
    if not isinstance(data, dict):
        raise DataLoadError(f"Expected a mapping at top level of {file_path}")
    return data


def load_metadata(file_path: Path, schema_dir: Optional[Path] = None) -> GridMetadata:
    """Load grid metadata; grid.rows and grid.cols are authoritative"""
    data = _require_mapping(load_json(file_path), file_path)

    if schema_dir:
        validate_against_schema(data, schema_dir / "metadata.schema.json", file_path)

    grid = data.get('grid')
    if not isinstance(grid, dict):
        raise DataLoadError(f"Missing 'grid' section in {file_path}")

    rows, cols = grid.get('rows'), grid.get('cols')
    for name, value in (('rows', rows), ('cols', cols)):
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise DataLoadError(f"grid.{name} must be a positive integer in {file_path}")

    extra = {key: value for key, value in data.items() if key != 'grid'}
    return GridMetadata(rows=rows, cols=cols, extra=extra)


def load_missions(file_path: Path, schema_dir: Optional[Path] = None) -> List[Mission]:
    """Load mission definitions from YAML"""
    data = _require_mapping(load_yaml(file_path), file_path)

    if schema_dir:
        validate_against_schema(data, schema_dir / "missions.schema.json", file_path)

    entries = data.get('missions', [])
    if not isinstance(entries, list):
        raise DataLoadError(f"Expected a list of missions in {file_path}")

    missions = []
    for m_data in entries:
        try:
            mission_type = MissionType(m_data['type'])
            narration = MissionNarration(**m_data.get('narration', {}))
            missions.append(Mission(
                id=m_data['id'],
                title=m_data['title'],
                description=m_data.get('description', ""),
                type=mission_type,
                target_count=m_data.get('target_count'),
                target_depth=m_data.get('target_depth'),
                target_pressure=m_data.get('target_pressure'),
                time_limit=m_data.get('time_limit', 0) or 0,
                narration=narration,
            ))
        except (KeyError, TypeError, ValueError) as e:
            raise DataLoadError(f"Invalid mission entry in {file_path}: {e}") from e

    ids = [m.id for m in missions]
    if len(ids) != len(set(ids)):
        raise DataLoadError(f"Duplicate mission ids in {file_path}")

    return missions


def load_facts(file_path: Path, schema_dir: Optional[Path] = None) -> Dict[str, List[str]]:
    """Load biome facts: topic -> list of lines"""
    data = _require_mapping(load_yaml(file_path), file_path)

    if schema_dir:
        validate_against_schema(data, schema_dir / "facts.schema.json", file_path)

    try:
        facts = data.get('facts', {})
        return {str(topic).lower(): list(lines) for topic, lines in facts.items()}
    except (AttributeError, TypeError) as e:
        raise DataLoadError(f"Invalid facts in {file_path}: {e}") from e


def load_session_config(file_path: Path, schema_dir: Optional[Path] = None) -> SessionConfig:
    """Load session tunables; missing keys fall back to defaults"""
    data = load_yaml(file_path) or {}
    data = _require_mapping(data, file_path)

    if schema_dir:
        validate_against_schema(data, schema_dir / "session.schema.json", file_path)

    try:
        return SessionConfig(**data)
    except TypeError as e:
        raise DataLoadError(f"Unknown session setting in {file_path}: {e}") from e


def load_world_sources(data_root: Path) -> Dict[str, List[Dict[str, Any]]]:
    """Load every tabular world source; any missing source is fatal"""
    data_root = Path(data_root)
    return {
        name: load_csv(data_root / relative)
        for name, relative in CSV_SOURCES.items()
    }


def load_all_data(data_root: Path, schema_dir: Optional[Path] = None) -> dict:
    """Load all session data from a data pack directory

    Returns dict with keys: metadata, sources, missions, facts, config
    """
    data_root = Path(data_root)
    if not data_root.exists():
        raise DataLoadError(f"Data directory not found: {data_root}")

    metadata = load_metadata(data_root / METADATA_FILE, schema_dir)
    sources = load_world_sources(data_root)
    missions = load_missions(data_root / MISSIONS_FILE, schema_dir)
    facts = load_facts(data_root / FACTS_FILE, schema_dir)

    # Session settings are optional; defaults apply without the file
    session_path = data_root / SESSION_FILE
    if session_path.exists():
        config = load_session_config(session_path, schema_dir)
    else:
        config = SessionConfig()

    return {
        'metadata': metadata,
        'sources': sources,
        'missions': missions,
        'facts': facts,
        'config': config,
    }
