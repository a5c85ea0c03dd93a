from .auth import User, SessionToken
from .boxes import Box, ActivatedBook
from .entries import DailyBoxEntry, DailyEntrySubmission, ContinuityLog
from .reports import LotteryReport, InstantCashoutReport, OnlineSettlementReport, POSReport, DailyCashRegister
from .players import Player, PlayerTransaction

__all__ = [
    'User', 'SessionToken',
    'Box', 'ActivatedBook',
    'DailyBoxEntry', 'DailyEntrySubmission', 'ContinuityLog',
    'LotteryReport', 'InstantCashoutReport', 'OnlineSettlementReport', 'POSReport', 'DailyCashRegister',
    'Player', 'PlayerTransaction',
]
