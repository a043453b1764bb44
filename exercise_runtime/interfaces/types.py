# exercise_runtime/interfaces/types.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Any, Callable, Dict, Mapping, Sequence, Union

OptionID = str
ExerciseID = str
VariantType = str

# A string, or a mapping of language code to string.
LocalizedText = Union[str, Mapping[str, str]]

# Canonical answer shape for selection based variants.
Answer = Sequence[OptionID]

Payload = Dict[str, Any]

# Callback Types
Listener = Callable[[Any], None]
TickCallback = Callable[[], None]
Clock = Callable[[], float]
