#!/usr/bin/env python
#-*- coding:utf-8 -*-
##
## puzzles.py
##
"""
    Where Sudoku puzzles come from

    A :class:`PuzzleProvider` hands out a validated :class:`~amlpy.seminar.sudoku.SudokuBoard`
    for a difficulty level, whatever its origin:

    - :class:`StaticPuzzleProvider`: a built-in set of boards, three per level
    - :class:`RemotePuzzleProvider`: a board generated by a sugoku web service
    - :class:`FallbackPuzzleProvider`: tries a list of providers until one delivers

    The remote service answers `GET <base_url>/board?difficulty=<level>` with
    a JSON object holding the 9x9 board under the key "board". Its address can be changed
    with the `AMLPY_PUZZLE_URL` environment variable.

    ===============
    List of classes
    ===============
    .. autosummary::
        :nosignatures:

        PuzzleProvider
        StaticPuzzleProvider
        RemotePuzzleProvider
        FallbackPuzzleProvider

    =================
    List of functions
    =================
    .. autosummary::
        :nosignatures:

        get_provider
"""
import logging
import os
import random
import warnings

import requests

from ..exceptions import PuzzleSourceError, InvalidBoardError
from .sudoku import SudokuBoard

logger = logging.getLogger(__name__)

LEVELS = ("easy", "medium", "hard")
DEFAULT_PUZZLE_URL = "https://sugoku2.herokuapp.com"
HTTP_TIMEOUT = 10  # seconds

BOARDS = {
    "easy": [
        [[0,0,0,0,0,8,0,0,5],[0,0,0,4,0,0,0,0,0],[0,6,0,1,0,0,2,0,7],[2,0,0,3,7,0,0,9,6],[3,5,6,0,9,1,4,7,0],[0,9,0,0,2,4,0,0,0],[0,4,5,7,1,0,0,0,0],[7,0,1,0,8,0,0,2,4],[9,8,2,5,0,3,0,6,0]],
        [[0,0,6,0,0,0,0,0,0],[0,2,0,5,0,8,0,0,9],[0,7,0,0,0,9,0,0,0],[0,0,0,0,0,0,0,0,0],[0,0,7,0,9,0,0,0,4],[0,0,9,4,2,7,3,0,0],[6,0,0,9,4,2,7,8,0],[7,0,2,6,8,5,9,1,0],[8,0,5,0,0,3,6,4,2]],
        [[0,5,7,1,0,0,8,0,0],[1,0,3,0,0,0,4,7,9],[0,0,0,2,3,7,0,0,6],[2,0,0,0,5,0,0,9,8],[0,6,0,0,9,0,2,0,0],[0,0,0,0,0,0,3,6,0],[0,0,0,6,2,4,9,8,7],[0,4,0,9,0,3,0,0,0],[9,0,0,8,1,0,6,3,4]],
    ],
    "medium": [
        [[0,0,9,0,8,0,0,0,0],[1,2,3,4,0,7,0,0,0],[5,0,0,0,0,9,0,4,0],[0,1,4,3,0,0,0,9,8],[3,0,0,0,9,0,0,0,4],[0,9,0,0,0,0,0,0,0],[4,3,0,0,0,2,0,0,0],[6,7,0,9,0,0,0,0,3],[0,8,0,6,0,5,4,7,1]],
        [[0,5,0,0,9,0,0,0,0],[1,0,0,0,0,8,0,7,0],[7,8,9,0,0,0,0,0,0],[0,0,3,4,0,0,7,0,8],[4,6,5,0,0,0,0,2,3],[0,0,7,0,1,0,0,0,5],[5,0,0,0,4,0,0,0,0],[6,7,0,0,8,0,0,0,2],[0,3,0,5,2,7,6,0,1]],
        [[0,8,0,0,0,0,1,0,0],[0,0,0,0,5,0,0,8,0],[0,6,7,0,0,0,0,0,5],[0,0,0,0,0,0,7,9,8],[3,5,0,0,0,0,4,0,0],[0,0,0,0,0,0,0,0,0],[6,0,1,0,2,0,9,7,4],[8,0,2,0,7,0,0,0,0],[9,7,5,6,4,0,8,0,0]],
    ],
    "hard": [
        [[0,0,0,0,6,0,2,0,0],[0,3,0,0,0,0,0,7,0],[0,0,0,2,0,0,0,0,0],[1,0,0,0,7,0,8,0,0],[4,5,0,0,0,0,0,1,0],[7,0,0,6,1,2,3,0,0],[3,0,0,5,2,6,9,0,0],[0,0,0,0,0,1,0,2,0],[0,0,0,8,0,0,0,6,1]],
        [[0,0,0,0,0,1,4,6,0],[0,0,0,0,0,6,0,8,0],[5,0,8,0,0,0,0,2,3],[2,1,3,5,0,0,6,0,0],[4,5,6,0,0,0,0,0,7],[0,0,0,0,2,0,0,0,0],[0,0,0,0,0,0,0,0,0],[6,0,0,0,0,4,8,5,0],[0,8,5,7,0,0,0,0,0]],
        [[7,0,0,0,0,2,6,3,5],[1,2,0,4,5,0,0,0,0],[0,0,0,0,0,8,1,0,4],[0,0,0,0,3,0,0,0,0],[3,4,6,0,8,0,2,0,0],[0,0,0,0,0,0,0,0,0],[0,3,1,0,0,7,0,0,8],[0,0,0,8,0,0,0,0,0],[0,7,0,0,0,0,0,1,0]],
    ],
}


def _check_level(level):
    if level not in LEVELS:
        raise PuzzleSourceError(f"Unknown difficulty level '{level}', choose from {LEVELS}")


class PuzzleProvider(object):
    """
        Abstract supplier of Sudoku boards
    """
    name = "abstract"

    def get_board(self, level="easy"):
        """
            A board of the given difficulty level

            :return: SudokuBoard
            :raises PuzzleSourceError: when no board can be delivered
        """
        raise NotImplementedError("PuzzleProvider.get_board(): abstract function, overwrite")

    def __repr__(self):
        return f"{type(self).__name__}()"


class StaticPuzzleProvider(PuzzleProvider):
    """
        Picks one of the built-in boards at random

        - seed: optional, makes the choice reproducible
        - boards: optional dict level -> list of 9x9 grids, default the built-in ones
    """
    name = "static"

    def __init__(self, seed=None, boards=None):
        self.rng = random.Random(seed)
        self.boards = BOARDS if boards is None else boards

    def get_board(self, level="easy"):
        _check_level(level)
        if len(self.boards.get(level, [])) == 0:
            raise PuzzleSourceError(f"No {level} boards available")
        return SudokuBoard(self.rng.choice(self.boards[level]))


class RemotePuzzleProvider(PuzzleProvider):
    """
        Fetches a freshly generated board from a sugoku web service

        - base_url: address of the service, default `$AMLPY_PUZZLE_URL` or the public sugoku server
        - timeout: seconds to wait for an answer
    """
    name = "remote"

    def __init__(self, base_url=None, timeout=HTTP_TIMEOUT, session=None):
        if base_url is None:
            base_url = os.environ.get("AMLPY_PUZZLE_URL", DEFAULT_PUZZLE_URL)
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session if session is not None else requests

    def get_board(self, level="easy"):
        _check_level(level)
        url = f"{self.base_url}/board"
        logger.debug("Fetching %s board from %s", level, url)
        try:
            response = self.session.get(url, params={"difficulty": level}, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            raise PuzzleSourceError(f"Could not fetch a board from {url}: {e}") from e
        except ValueError as e:  # body is not JSON
            raise PuzzleSourceError(f"Answer of {url} is not valid JSON: {e}") from e

        if not isinstance(payload, dict) or "board" not in payload:
            raise PuzzleSourceError(f"Answer of {url} has no 'board' field")
        try:
            return SudokuBoard(payload["board"])
        except InvalidBoardError as e:
            raise PuzzleSourceError(f"Answer of {url} holds an invalid board: {e}") from e

    def __repr__(self):
        return f"RemotePuzzleProvider({self.base_url!r})"


class FallbackPuzzleProvider(PuzzleProvider):
    """
        Asks the given providers in order, the first board delivered is returned
    """
    name = "fallback"

    def __init__(self, *providers):
        assert len(providers) > 0, "FallbackPuzzleProvider needs at least one provider"
        self.providers = list(providers)

    def get_board(self, level="easy"):
        _check_level(level)
        errors = []
        for i, provider in enumerate(self.providers):
            try:
                return provider.get_board(level)
            except PuzzleSourceError as e:
                errors.append(e)
                if i+1 < len(self.providers):
                    warnings.warn(f"{provider!r} could not deliver a board ({e}), falling back on {self.providers[i+1]!r}")
        raise PuzzleSourceError(f"None of the puzzle providers delivered a board: {errors}")

    def __repr__(self):
        return "FallbackPuzzleProvider({})".format(", ".join(map(repr, self.providers)))


def get_provider(live=False, base_url=None, seed=None):
    """
        The default puzzle provider

        - live: fetch boards from the web service, with the built-in boards as fallback
        - base_url: address of the web service (see RemotePuzzleProvider)
        - seed: seed for the choice among the built-in boards
    """
    static = StaticPuzzleProvider(seed=seed)
    if not live:
        return static
    return FallbackPuzzleProvider(RemotePuzzleProvider(base_url=base_url), static)
