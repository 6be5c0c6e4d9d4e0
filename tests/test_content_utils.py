from projectcheck.schemas.analysis_schemas import WritingStyle
from projectcheck.utils.content_utils import analyze_content, count_citations, detect_sections, extract_topics


def test_detect_sections():
    text = "Introduction\n...\nLiterature Review\n...\nMethodology\n...\nReferences"
    sections = detect_sections(text)
    assert {"introduction", "literature review", "methodology", "references"} <= set(sections)


def test_count_citations():
    assert count_citations("As shown by Smith et al. (2020) and in [3].") >= 3
    assert count_citations("No sources here at all.") == 0


def test_extract_topics_skips_short_and_stop_words():
    topics = extract_topics("network network network security security the and of a")
    assert topics[:2] == ["network", "security"]


def test_technical_style_takes_precedence(mern_doc):
    profile = analyze_content(*mern_doc)
    assert profile.hasTechnicalContent
    assert profile.writingStyle == WritingStyle.technical


def test_business_profile(covid_doc):
    profile = analyze_content(*covid_doc)
    assert profile.hasBusinessContent
    assert not profile.hasTechnicalContent
    assert profile.hasMethodology and profile.hasResults
    assert profile.depthScore == 2
    assert profile.sentenceCount > 10


def test_empty_document_profile():
    profile = analyze_content("", "", "")
    assert profile.sentenceCount == 0
    assert profile.avgSentenceWords == 0
    assert profile.writingStyle == WritingStyle.academic
    assert profile.depthScore == 0


def test_extract_topics_drops_nltk_stop_words():
    topics = extract_topics("themselves themselves themselves ourselves ourselves yourselves network")
    assert topics == ["network"]
