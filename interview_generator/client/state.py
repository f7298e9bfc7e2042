"""Application state shared by the client components of one session."""

import logging
from typing import Iterable, List

from interview_generator.schemas.interview import Interview

logger = logging.getLogger(__name__)


class ApplicationState:
    """
    Holds the generated interviews and the generation-in-progress flag.

    One instance per client session, passed explicitly to the components that
    need it. Any component may read; setters are the only mutation path:
    - set_interviewing: job lifecycle controller and checkout initiator
    - set_interviews: job lifecycle controller, on completion
    """

    def __init__(self):
        self._interviews: List[Interview] = []
        self._interviewing = False

    @property
    def interviews(self) -> List[Interview]:
        # Copy so readers cannot mutate the held list
        return list(self._interviews)

    @property
    def interviewing(self) -> bool:
        return self._interviewing

    def set_interviews(self, interviews: Iterable[Interview]) -> None:
        self._interviews = list(interviews)
        logger.debug(f"State: interviews replaced ({len(self._interviews)} held)")

    def set_interviewing(self, interviewing: bool) -> None:
        if interviewing != self._interviewing:
            logger.debug(f"State: interviewing {self._interviewing} -> {interviewing}")
        self._interviewing = interviewing
