"""
Environment-driven settings for the task engine and its command line front end.
"""
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_DATA_DIR = Path(".taskcanvas")
DEFAULT_TASKS_FILENAME = "tasks.yml"
TEMPLATES_FILENAME = "templates.yml"
DEFAULT_UPCOMING_DAYS = 7


class Settings(BaseModel):
    data_dir: Path = Field(default=DEFAULT_DATA_DIR, description="Directory holding the tasks file")
    tasks_file: Path = Field(
        default=DEFAULT_DATA_DIR / DEFAULT_TASKS_FILENAME,
        description="The YAML or JSON file the task tree is stored in"
    )
    upcoming_days: int = Field(
        default=DEFAULT_UPCOMING_DAYS,
        description="Width of the 'upcoming' due-date bucket, in days"
    )

    @field_validator('upcoming_days')
    @classmethod
    def validate_upcoming_days(cls, v):
        if v < 1:
            raise ValueError(f"upcoming window must be at least one day, got {v}")
        return v


def load_settings(environ: Optional[dict] = None) -> Settings:
    """Build settings from TASKCANVAS_* environment variables."""
    env = os.environ if environ is None else environ

    data_dir = Path(env.get('TASKCANVAS_DATA_DIR') or DEFAULT_DATA_DIR)
    tasks_file = env.get('TASKCANVAS_FILE')
    values = {
        'data_dir': data_dir,
        'tasks_file': Path(tasks_file) if tasks_file else data_dir / DEFAULT_TASKS_FILENAME,
    }
    if env.get('TASKCANVAS_UPCOMING_DAYS'):
        values['upcoming_days'] = int(env['TASKCANVAS_UPCOMING_DAYS'])

    return Settings(**values)


def templates_file_for(tasks_file: Path) -> Path:
    """Custom templates live in a templates.yml beside the tasks file."""
    return Path(tasks_file).parent / TEMPLATES_FILENAME
