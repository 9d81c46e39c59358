# deploy_pipeline/models/project.py
"""Project declaration models"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from ..api.exceptions import MissingFieldError, ProjectDeclarationError
from ..constants import (
    COMPILED_EXTENSIONS,
    COMPILED_LANGUAGES,
    INTERPRETED_EXTENSIONS,
    INTERPRETED_LANGUAGES,
)


class RuntimeKind(Enum):
    """Runtime kind of a declared project"""
    COMPILED = "compiled"
    INTERPRETED = "interpreted"
    NONE = "none"  # no declared language or project file extension
    UNKNOWN = "unknown"

    @classmethod
    def from_language(cls, language: Optional[str]) -> 'RuntimeKind':
        """Resolve a declared language name"""
        if not language or not language.strip():
            return cls.NONE

        normalized = language.strip().lower()
        if normalized in COMPILED_LANGUAGES:
            return cls.COMPILED
        if normalized in INTERPRETED_LANGUAGES:
            return cls.INTERPRETED
        return cls.UNKNOWN

    @classmethod
    def from_extension(cls, extension: str) -> 'RuntimeKind':
        """Resolve a project file extension (including the leading dot)"""
        if not extension:
            return cls.NONE

        normalized = extension.lower()
        if normalized in COMPILED_EXTENSIONS:
            return cls.COMPILED
        if normalized in INTERPRETED_EXTENSIONS:
            return cls.INTERPRETED
        return cls.UNKNOWN


@dataclass(frozen=True)
class ProjectDeclaration:
    """Immutable per-project configuration

    ``runtime`` keeps the raw language or extension the kind was resolved
    from, so unsupported declarations can be reported verbatim.
    """
    name: str
    source_directory: Path
    branch: str
    runtime_kind: RuntimeKind = RuntimeKind.NONE
    runtime: str = ""
    project_file: Optional[Path] = None
    publish_target: Optional[Path] = None
    post_deploy_hook: Optional[Path] = None
    active: bool = True
    group: int = 0

    @property
    def project_file_name(self) -> str:
        """Project file passed to the publish command

        Without a declared project file the source directory is passed,
        which the toolchain searches for its single project file.
        """
        if self.project_file is not None:
            return self.project_file.name
        return str(self.source_directory)

    @classmethod
    def from_project_path(cls, name: str, project_path: Path, branch: str,
                          **kwargs) -> 'ProjectDeclaration':
        """Create from a path that is either a project file or a directory

        A project file gives the source directory (its parent) and the
        runtime kind (its extension). A directory is taken as the source
        directory of a project with no declared extension.
        """
        if project_path.is_file():
            return cls(
                name=name,
                source_directory=project_path.parent,
                branch=branch,
                runtime_kind=RuntimeKind.from_extension(project_path.suffix),
                runtime=project_path.suffix,
                project_file=project_path,
                **kwargs
            )

        return cls(
            name=name,
            source_directory=project_path,
            branch=branch,
            runtime_kind=RuntimeKind.NONE,
            **kwargs
        )

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any],
                  base_dir: Optional[Path] = None) -> 'ProjectDeclaration':
        """Create from a project document entry

        Args:
            name: Project name (the key in the ``projects`` map)
            data: Declared attributes
            base_dir: Directory relative paths are resolved against

        Raises:
            MissingFieldError: If ``directory`` or ``branch`` is absent
            ProjectDeclarationError: If a field has the wrong type
        """
        if not isinstance(data, dict):
            raise ProjectDeclarationError(name, "declaration must be a mapping")

        for required in ('directory', 'branch'):
            if not data.get(required):
                raise MissingFieldError(name, required)

        active = data.get('active', True)
        if not isinstance(active, bool):
            raise ProjectDeclarationError(name, "'active' must be true or false")

        try:
            group = int(data.get('group', 0))
        except (TypeError, ValueError):
            raise ProjectDeclarationError(name, "'group' must be an integer")

        language = data.get('language') or ""
        project_file = _resolve(data.get('projectFile'), base_dir)
        if project_file is not None and not language:
            runtime_kind = RuntimeKind.from_extension(project_file.suffix)
            runtime = project_file.suffix
        else:
            runtime_kind = RuntimeKind.from_language(language)
            runtime = language

        return cls(
            name=name,
            source_directory=_resolve(data['directory'], base_dir),
            branch=str(data['branch']),
            runtime_kind=runtime_kind,
            runtime=runtime,
            project_file=project_file,
            publish_target=_resolve(data.get('publishLocation'), base_dir),
            post_deploy_hook=_resolve(data.get('postDeployBatchFile'), base_dir),
            active=active,
            group=group,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            'directory': str(self.source_directory),
            'branch': self.branch,
            'language': self.runtime,
            'active': self.active,
            'group': self.group,
        }

        if self.project_file:
            data['projectFile'] = str(self.project_file)
        if self.publish_target:
            data['publishLocation'] = str(self.publish_target)
        if self.post_deploy_hook:
            data['postDeployBatchFile'] = str(self.post_deploy_hook)

        return data


def _resolve(value: Optional[str], base_dir: Optional[Path]) -> Optional[Path]:
    if value is None or not str(value).strip():
        return None

    path = Path(str(value)).expanduser()
    if base_dir is not None and not path.is_absolute():
        path = base_dir / path
    return path
