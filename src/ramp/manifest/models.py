"""Pydantic models for the generation manifest.

The manifest is the only state persisted between runs. On disk it uses
camelCase keys (``viewType``, ``generatedViews``) so existing manifests
written by earlier versions of the tool keep loading.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

MANIFEST_VERSION = "1.0.0"


class ViewType(str, Enum):
    """Generated view kinds, in generation order."""

    LIST = "List"
    CREATE = "Create"
    UPDATE = "Update"
    DELETE = "Delete"
    SEARCH = "Search"


class GeneratedView(BaseModel):
    """Fingerprint of the last rendering written for one (model, view) pair.

    Example:
        >>> view = GeneratedView(model="Post", view_type="List", hash="abc")
        >>> view.model_dump(by_alias=True)
        {'model': 'Post', 'viewType': 'List', 'hash': 'abc'}
    """

    model_config = ConfigDict(populate_by_name=True)

    model: str
    view_type: str = Field(alias="viewType")
    hash: str


class MigrationManifest(BaseModel):
    """Persisted record of generated views.

    Example:
        >>> manifest = MigrationManifest()
        >>> manifest.version, manifest.generated_views
        ('1.0.0', [])
    """

    model_config = ConfigDict(populate_by_name=True)

    version: str = MANIFEST_VERSION
    generated_views: list[GeneratedView] = Field(
        default_factory=list, alias="generatedViews"
    )

    def find(self, model: str, view_type: ViewType | str) -> GeneratedView | None:
        """Return the first entry for (*model*, *view_type*), or ``None``."""
        kind = view_type.value if isinstance(view_type, ViewType) else view_type
        for view in self.generated_views:
            if view.model == model and view.view_type == kind:
                return view
        return None

    def to_json_dict(self) -> dict:
        """Serialize with on-disk key names."""
        return self.model_dump(by_alias=True)
