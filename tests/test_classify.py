from idea_planner.core.classify.keyword_classifier import KeywordClassifier
from idea_planner.core.model import FeatureTags


def test_social_platform_is_web_and_social():
    tags = KeywordClassifier().classify("A social media platform for pet owners")
    assert tags == FeatureTags(is_web_app=True, is_social=True)


def test_ai_mobile_app():
    tags = KeywordClassifier().classify("AI-powered mobile app for language learning")
    assert tags == FeatureTags(is_mobile_app=True, is_ai=True)


def test_marketplace_is_ecommerce_and_web():
    tags = KeywordClassifier().classify("marketplace for handmade ecommerce goods")
    assert tags == FeatureTags(is_web_app=True, is_ecommerce=True)


def test_matching_is_case_insensitive():
    tags = KeywordClassifier().classify("An INTELLIGENT Android companion")
    assert tags.is_ai
    assert tags.is_mobile_app


def test_no_keywords_gives_all_false():
    tags = KeywordClassifier().classify("Recipe tracker for gardeners")
    assert tags == FeatureTags()
    assert tags.active() == []


def test_substring_matching_fires_inside_words():
    # "detailed" contains "ai"
    assert KeywordClassifier().classify("Detailed budget reports").is_ai


def test_custom_keyword_table():
    classifier = KeywordClassifier({"is_social": ["club"]})
    tags = classifier.classify("Book club organizer for web")
    assert tags == FeatureTags(is_social=True)
    assert classifier.keywords["is_ai"] == ()
