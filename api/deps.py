from fastapi import Request
from facility.carehome import CareHome


def get_home(request: Request) -> CareHome:
    """The CareHome instance the app was created with."""
    return request.app.state.home
