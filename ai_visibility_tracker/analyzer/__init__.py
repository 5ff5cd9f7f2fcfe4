"""
Response-analysis engine for AI Visibility Tracker.

Scores how often, how prominently, and in what context tracked brands appear
in language-model answers.

Public API:
    - analyze: Single entry point producing an AnalysisResult
    - AnalysisResult, BrandResult, PromptResult, CitationResult: Result records
    - PromptResponsePair: Input unit
    - ConfidenceLevel: Sample-size reliability label
    - AnalysisSession: Cumulative analysis across a conversation
    - create_brand_pattern: Compile a brand into a word-boundary matcher
    - extract_urls, get_domain: Citation helpers
    - visibility_level: Display label for prompt coverage
"""

from ai_visibility_tracker.analyzer.citations import extract_urls, get_domain
from ai_visibility_tracker.analyzer.engine import analyze, confidence_level
from ai_visibility_tracker.analyzer.levels import visibility_level
from ai_visibility_tracker.analyzer.models import (
    AnalysisResult,
    BrandResult,
    CitationResult,
    ConfidenceLevel,
    PromptResponsePair,
    PromptResult,
)
from ai_visibility_tracker.analyzer.patterns import create_brand_pattern
from ai_visibility_tracker.analyzer.session import AnalysisSession

__all__ = [
    "AnalysisResult",
    "AnalysisSession",
    "BrandResult",
    "CitationResult",
    "ConfidenceLevel",
    "PromptResponsePair",
    "PromptResult",
    "analyze",
    "confidence_level",
    "create_brand_pattern",
    "extract_urls",
    "get_domain",
    "visibility_level",
]
