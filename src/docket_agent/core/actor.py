"""
Role normalization for the recording lawyer.
"""

from ..models import ActorContext, ActorRole


def normalize_actor(actor: ActorContext) -> ActorContext:
    """
    Return an actor context that respects role constraints.

    A JUNIOR never has a delegated junior nor auto-assignment enabled.
    The input is left untouched; a new frozen context is returned.
    """
    if actor.role != ActorRole.JUNIOR:
        return actor

    preferences = actor.preferences.model_copy(update={"auto_assign_to_junior": False})
    return actor.model_copy(update={
        "junior_name": None,
        "junior_email": None,
        "preferences": preferences
    })
