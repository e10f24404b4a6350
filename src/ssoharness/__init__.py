"""SSO 통합테스트 환경 구동/정리 하네스"""

__version__ = "0.1.0"
