"""
Package marker for source code under `src`.
It groups the API and its shared configuration helpers under one stable import path.
Most functionality lives in `src.api`; this file intentionally stays lightweight.
"""
