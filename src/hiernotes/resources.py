from importlib import resources


def load_sample_outline() -> str:
    with resources.files(__package__).joinpath("data/sample_outline.txt").open("r", encoding="utf-8") as fh:
        return fh.read()
