"""
Mirror Match - 표정 따라하기 게임과 비전 API 분석 프록시
"""

__version__ = "1.0.0"
