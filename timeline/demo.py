"""
Sample mutation registry for a small sign-up form.

Usable from the CLI:

    timeline replay history.json --registry timeline.demo:FORM_MUTATIONS
"""

from typing import Any, Dict


def update_name(name: str):
    def mutate(draft: Dict[str, Any]) -> None:
        draft["name"] = name
    return mutate


def update_age(age: int):
    if isinstance(age, bool) or not isinstance(age, int):
        raise ValueError(f"age must be an int, got {age!r}")
    if age < 0:
        raise ValueError(f"age must be >= 0, got {age}")

    def mutate(draft: Dict[str, Any]) -> None:
        draft["age"] = age
    return mutate


def toggle_agree():
    def mutate(draft: Dict[str, Any]) -> None:
        draft["agree"] = not draft["agree"]
    return mutate


FORM_MUTATIONS = {
    "updateName": update_name,
    "updateAge": update_age,
    "toggleAgree": toggle_agree,
}


def initial_form() -> Dict[str, Any]:
    return {"name": "", "age": 18, "agree": False}
