from importlib import resources
from typing import List


class ExampleNotFoundError(LookupError):
    """Raised when no bundled example has the requested name."""


def _examples_dir():
    return resources.files(__package__).joinpath("data/examples")


def list_examples() -> List[str]:
    return sorted(
        entry.name[: -len(".md")]
        for entry in _examples_dir().iterdir()
        if entry.name.endswith(".md")
    )


def load_example(name: str) -> str:
    if name not in list_examples():
        raise ExampleNotFoundError(f'example "{name}" not found')
    with _examples_dir().joinpath(f"{name}.md").open("r", encoding="utf-8") as fh:
        return fh.read()
