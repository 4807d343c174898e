from pathlib import Path
import sys

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from artifact_catalog.schemas.artifacts import Artifact
from artifact_catalog.services.path_parser import PathParser


def make_artifact(path: str, name: str, repo: str = "libs-release", size: int = 100, created: str = "2024-01-01T00:00:00Z") -> Artifact:
    return Artifact(
        name=name,
        path=path,
        repo=repo,
        size=size,
        created=created,
        modified=created,
        updated=created,
        createdBy="jenkins",
        modifiedBy="jenkins",
        updatedBy="jenkins",
        sha1="a94a8fe5ccb19ba61c4c0873d391e987982fbbd3",
        md5="5d41402abc4b2a76b9719d911017c592",
    )


@pytest.fixture
def artifact():
    return make_artifact


@pytest.fixture
def parser():
    return PathParser()
