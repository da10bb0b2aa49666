"""JSON file persistence for the in-memory repository.

The CLI loads the whole data set from a JSON file, runs one operation
against an InMemoryTimesheetRepository and writes the file back.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Union

from pydantic import Field

from timesheet_engine.models.base import BaseDataModel
from timesheet_engine.models.conversation import ConversationReference
from timesheet_engine.models.project import Project
from timesheet_engine.models.timesheet import TimesheetEntry
from timesheet_engine.repositories.memory import InMemoryTimesheetRepository

logger = logging.getLogger(__name__)


class StoreSnapshot(BaseDataModel):
    """Serialized content of a repository."""

    projects: List[Project] = Field(default_factory=list)
    timesheets: List[TimesheetEntry] = Field(default_factory=list)
    conversations: List[ConversationReference] = Field(default_factory=list)


def load_repository(path: Union[str, Path]) -> InMemoryTimesheetRepository:
    """Load a repository from a JSON data file.

    A missing file yields an empty repository.

    Args:
        path: Location of the data file

    Returns:
        Repository populated with the file's projects, timesheets and
        conversations

    Raises:
        pydantic.ValidationError: If the file content is not a valid snapshot
    """
    path = Path(path)
    if not path.exists():
        logger.info(f"Data file {path} not found, starting with an empty store")
        return InMemoryTimesheetRepository()

    with path.open("r", encoding="utf-8") as handle:
        snapshot = StoreSnapshot.model_validate(json.load(handle))

    logger.info(
        f"Loaded {len(snapshot.projects)} projects, {len(snapshot.timesheets)} "
        f"timesheets and {len(snapshot.conversations)} conversations from {path}"
    )
    return InMemoryTimesheetRepository(
        projects=snapshot.projects,
        timesheets=snapshot.timesheets,
        conversations=snapshot.conversations,
    )


def save_repository(repository: InMemoryTimesheetRepository, path: Union[str, Path]) -> None:
    """Write the repository's committed content to a JSON data file.

    The file is replaced atomically so an interrupted write never leaves a
    truncated data file behind.
    """
    path = Path(path)
    snapshot = StoreSnapshot(
        projects=repository.all_projects(),
        timesheets=repository.all_timesheets(),
        conversations=repository.all_conversations(),
    )
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(snapshot.model_dump_json(indent=2))
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)
        raise

    logger.debug(f"Saved {len(snapshot.timesheets)} timesheets to {path}")
