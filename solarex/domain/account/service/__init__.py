"""Account domain services."""

from solarex.domain.account.service.classifier import AccountClassifier
from solarex.domain.account.service.processor import AccountProcessor
from solarex.domain.account.service.router import AccountRouter

__all__ = ["AccountClassifier", "AccountProcessor", "AccountRouter"]
