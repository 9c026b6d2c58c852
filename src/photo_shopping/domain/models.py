from dataclasses import dataclass


@dataclass(frozen=True)
class WordPositionEntry:
    text: str
    lower_x_boundary: int  # x of the bounding box's lower-left corner
    lower_y_boundary: int  # y of the bounding box's lower-left corner

    @classmethod
    def create(cls, text: str, lower_x: int, lower_y: int) -> "WordPositionEntry":
        return cls(text=str(text), lower_x_boundary=int(lower_x), lower_y_boundary=int(lower_y))


@dataclass(frozen=True)
class SearchOptions:
    language: str = "en"
    max_results: int = 50
