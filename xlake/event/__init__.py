#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (C) 2022-2022 Riku Block
# All rights reserved.
#
# This file is part of XLake.

from .decoder import EventDecoder
from .handler import (
    EventHandler,
    TopicDispatcher,
)
from .handler_token import (
    EventHandlerToken,
    EventHandlerWrappedToken,
)
from .handler_voting import EventHandlerVoting
from .ledger import (
    MAX_UINT256,
    TokenLedger,
)
