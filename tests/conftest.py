from types import SimpleNamespace

import pytest

from projectcheck.schemas.plagiarism_schemas import AiDetectionVerdict, AuthorshipReport


COVID_TITLE = "Impact of COVID-19 on Small Business Operations"
COVID_ABSTRACT = (
    "This study examines how the COVID-19 pandemic affected small businesses in Nigeria. "
    "We analyze the economic impact, challenges faced by entrepreneurs, and strategies used to "
    "adapt to the crisis. The research uses surveys and interviews with business owners."
)
COVID_TEXT = """
Introduction:
The COVID-19 pandemic has created unprecedented challenges for small businesses worldwide. In Nigeria, many entrepreneurs faced closures, reduced customer demand, and supply chain disruptions. This study investigates how small businesses reacted to the crisis and what survival strategies they employed.

Research Methodology:
We conducted surveys with 150 small business owners across Lagos, Abuja, and Port Harcourt. Additionally, we performed in-depth interviews with 20 entrepreneurs to understand their experiences. The data was analyzed using statistical methods and thematic analysis.

Findings:
Our research revealed that 65% of small businesses experienced revenue declines of more than 50%. Many entrepreneurs shifted to online sales channels to reach customers during lockdowns. The most common challenges included reduced customer demand, supply chain interruptions, cash flow problems and employee layoffs.

Business owners who successfully adapted implemented strategies such as digital marketing through social media, diversifying product offerings, reducing operational costs and seeking government relief funds.

Economic Impact:
The pandemic caused significant economic hardship. Many businesses reported difficulties in paying rent and salaries. However, some entrepreneurs found new opportunities by pivoting to essential services or e-commerce platforms. The business model changes required creativity and resilience.

Conclusion:
This study demonstrates the severe impact of COVID-19 on small businesses. Entrepreneurs who adapted quickly by embracing digital channels and diversifying their offerings had better survival rates. Policymakers should provide targeted support to help businesses recover and build resilience against future crises.
"""

MERN_TITLE = "MERN Stack E-Commerce Web Application"
MERN_ABSTRACT = (
    "A web application built with MongoDB, Express, React and Node.js that lets customers "
    "browse products through a REST API."
)
MERN_TEXT = """
Implementation:
The backend is an Express server running on Node.js. Product and order data live in a MongoDB database.
The frontend is written in React and talks to the backend through a REST API. Every API route is covered by
a test, and the source code is kept in a Git repository. The React components fetch data from the API and the
Express routes query MongoDB through the Node.js driver. Deployment uses a single server for the API and the database.
"""

AI_HEAVY_TEXT = (
    "In today's digital world, technology plays a crucial role in every organisation. "
    "Furthermore, cutting-edge platforms leverage robust and seamless tools. "
    "Moreover, it is important to note that a holistic approach delivers a comprehensive solution. "
    "Additionally, the system plays a vital role in modern operations. "
    "In conclusion, this project aims to leverage state-of-the-art methods in a robust way. "
    "Furthermore, the design is robust, seamless and cutting-edge. "
)


class FakeInferenceClient:
    """Stands in for huggingface_hub.InferenceClient.chat_completion."""

    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.calls = 0

    def chat_completion(self, **kwargs):
        self.calls += 1
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FixedAuthorshipAnalyzer:
    name = "fixed"

    def __init__(self, originality=90, likelihood=15):
        self.originality = originality
        self.likelihood = likelihood

    def analyze(self, title, abstract, full_text):
        return AuthorshipReport(
            originalityScore=self.originality,
            aiGeneratedLikelihood=self.likelihood,
            aiDetectionVerdict=AiDetectionVerdict.human_written,
            analyzer=self.name,
        )


@pytest.fixture
def covid_doc():
    return COVID_TITLE, COVID_ABSTRACT, COVID_TEXT


@pytest.fixture
def mern_doc():
    return MERN_TITLE, MERN_ABSTRACT, MERN_TEXT
