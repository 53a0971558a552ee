"""Gemeinsame Basisklasse für alle Notenbuch-Modelle (Pydantic v2)."""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# Rohwert aus der Eingabe: Zahl, "M", leerer String oder gar nichts.
# Die Umwandlung in Zahlen übernimmt grading.scores – nicht das Modell.
RawValue = Optional[Union[float, str]]


class GradebookModel(BaseModel):
    """JSON-Felder in camelCase (categoryWeights, isFinal, ...), Python in snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
