"""
Mirror Match 설정 모듈
"""

from .match_config import MatchConfig, get_config, update_config, reset_config

__all__ = ['MatchConfig', 'get_config', 'update_config', 'reset_config']
