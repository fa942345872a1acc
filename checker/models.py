"""
Pydantic models for the project checker.

Defines the file tree nodes used by the structure check, the closed
family of check errors reported by every check, and the options of
the layout image comparison.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class FileNode(BaseModel):
    """
    A file entry of a project tree.

    Attributes:
        name: File name (no directory part).
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["file"] = Field(default="file", description="Node discriminant")
    name: str = Field(..., description="File name")


class DirNode(BaseModel):
    """
    A directory entry of a project tree.

    Attributes:
        name: Directory name (no parent part).
        children: Entries inside the directory.
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["directory"] = Field(default="directory", description="Node discriminant")
    name: str = Field(..., description="Directory name")
    children: tuple["TreeNode", ...] = Field(default=(), description="Directory entries")


TreeNode = Annotated[Union[FileNode, DirNode], Field(discriminator="type")]

DirNode.model_rebuild()


def mkfile(name: str) -> FileNode:
    """Build a file node."""
    return FileNode(name=name)


def mkdir(name: str, children: list[FileNode | DirNode] | None = None) -> DirNode:
    """Build a directory node from its children."""
    return DirNode(name=name, children=tuple(children or ()))


# ---------------------------------------------------------------------------
# Check errors
# ---------------------------------------------------------------------------


class ErrorValues(BaseModel):
    """Base for the interpolation data carried by an error."""

    model_config = ConfigDict(frozen=True)


class NameValues(ErrorValues):
    name: str


class W3CValues(ErrorValues):
    fileName: str
    line: int | None = None
    message: str


class StylelintValues(ErrorValues):
    fileName: str
    line: int | None = None
    column: int | None = None
    text: str


class FontsValues(ErrorValues):
    fonts: str


class TagNamesValues(ErrorValues):
    tagNames: str


class LangValues(ErrorValues):
    lang: str


class CheckError(BaseModel):
    """
    A single failed check.

    The `id` is a dotted taxonomy key; `values` holds the data used to
    render a human-readable message. Subclasses pin the id and the shape
    of the values for each kind of failure.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    values: ErrorValues | None = None

    def to_dict(self) -> dict:
        """Return the `{id, values}` form, omitting absent values."""
        data: dict = {"id": self.id}
        if self.values is not None:
            data["values"] = self.values.model_dump()
        return data


class StructureFileMissing(CheckError):
    id: Literal["structure.file"] = "structure.file"
    values: NameValues


class StructureDirectoryMissing(CheckError):
    id: Literal["structure.directory"] = "structure.directory"
    values: NameValues


class W3CError(CheckError):
    id: Literal["w3c"] = "w3c"
    values: W3CValues


class StylelintWarning(CheckError):
    id: str = Field(..., pattern=r"^stylelint\..+")
    values: StylelintValues


class AlternativeFonts(CheckError):
    id: Literal["alternativeFonts"] = "alternativeFonts"
    values: FontsValues


class LayoutDifferent(CheckError):
    id: Literal["layoutDifferent"] = "layoutDifferent"
    values: None = None


class SemanticTagsMissing(CheckError):
    id: Literal["semanticTagsMissing"] = "semanticTagsMissing"
    values: TagNamesValues


class LangAttrMissing(CheckError):
    id: Literal["langAttrMissing"] = "langAttrMissing"
    values: LangValues


class OrderStylesheetLinks(CheckError):
    id: Literal["orderStylesheetLinks"] = "orderStylesheetLinks"
    values: None = None


class NotResetMargins(CheckError):
    id: Literal["notResetMargins"] = "notResetMargins"
    values: TagNamesValues


class TitleEmmet(CheckError):
    id: Literal["titleEmmet"] = "titleEmmet"
    values: None = None


class LogoWrapper(CheckError):
    id: Literal["logoWrapper"] = "logoWrapper"
    values: None = None


class PrefixForEmailAndPhone(CheckError):
    id: Literal["prefixForEmailAndPhone"] = "prefixForEmailAndPhone"
    values: None = None


def structure_error(node: FileNode | DirNode) -> CheckError:
    """Build the `structure.<type>` error for a missing tree node."""
    values = NameValues(name=node.name)
    if node.type == "directory":
        return StructureDirectoryMissing(values=values)
    return StructureFileMissing(values=values)


# ---------------------------------------------------------------------------
# Layout comparison
# ---------------------------------------------------------------------------


class ImageDiffOptions(BaseModel):
    """
    Options of the screenshot comparison.

    Attributes:
        error_color: RGB colour used to paint differing pixels in the diff image.
        error_type: "flat" paints differing pixels with `error_color`;
            "movement" blends `error_color` with the actual pixel so moved
            content stays recognisable.
        transparency: Opacity (0..1) of the unchanged pixels in the diff image.
        scale_to_same_size: Resize the actual screenshot to the reference size
            before comparing. When False the smaller image is padded and the
            padding counts as mismatch.
        ignore: Pixel tolerance mode. "nothing" compares exactly, "less"
            tolerates small channel drift, "antialiasing" tolerates the drift
            produced by font smoothing, "colors" compares brightness only,
            "alpha" ignores the alpha channel.
        output_diff: Produce the diff image at all.
    """

    model_config = ConfigDict(frozen=True)

    error_color: tuple[int, int, int] = Field(default=(255, 0, 255), description="Diff highlight RGB")
    error_type: Literal["flat", "movement"] = Field(default="movement", description="Highlight mode")
    transparency: float = Field(default=0.3, ge=0, le=1, description="Opacity of unchanged pixels")
    scale_to_same_size: bool = Field(default=True, description="Resize actual image to reference size")
    ignore: Literal["nothing", "less", "antialiasing", "colors", "alpha"] = Field(
        default="antialiasing", description="Pixel tolerance mode"
    )
    output_diff: bool = Field(default=True, description="Whether to build the diff image")
