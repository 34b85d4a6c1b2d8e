import pytest

from infrastructure.ai.labeling_oracles import (
    LLMClassificationOracle,
    LLMOppositionOracle,
    build_classification_oracle,
    build_opposition_oracle,
)
from infrastructure.ai.model_factory import OfflineLabelingChatModel, build_chat_model
from infrastructure.errors import OracleFailure
from schemas.labeling import Category, OppositeLabelPair, OppositeLabelPairs


class _FakeChain:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    async def ainvoke(self, payload):
        self.calls.append(payload)
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "raw",
    [
        "Politics & Governance",
        '"Politics & Governance"',
        '```json\n"Politics & Governance"\n```',
        '{"category": "Politics & Governance"}',
        '["Politics & Governance"]',
        "  'Politics & Governance'  \n",
    ],
)
async def test_classification_reply_shapes_are_normalised(raw):
    oracle = LLMClassificationOracle(chain=_FakeChain(raw), max_attempts=1)

    assert await oracle.classify(["left-leaning"], Category.allowed()) == "Politics & Governance"


@pytest.mark.asyncio
async def test_classification_payload_lists_labels_and_categories():
    chain = _FakeChain("Sports")
    oracle = LLMClassificationOracle(chain=chain, max_attempts=1)

    await oracle.classify(["marathon", "running"], ["Sports", "all"])

    assert chain.calls == [
        {"labels": "- marathon\n- running", "categories": "1. Sports\n2. all"}
    ]


@pytest.mark.asyncio
async def test_classification_transport_error_becomes_oracle_failure():
    oracle = LLMClassificationOracle(chain=_FakeChain(RuntimeError("connection reset")), max_attempts=1)

    with pytest.raises(OracleFailure) as excinfo:
        await oracle.classify(["a"], Category.allowed())

    assert excinfo.value.oracle == "classification oracle"
    assert "connection reset" in str(excinfo.value)


@pytest.mark.asyncio
async def test_transient_errors_are_retried():
    chain = _FakeChain(RuntimeError("overloaded"), "Sports")
    oracle = LLMClassificationOracle(chain=chain, max_attempts=2)

    assert await oracle.classify(["marathon"], Category.allowed()) == "Sports"
    assert len(chain.calls) == 2


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "raw",
    [
        OppositeLabelPairs(pairs=[OppositeLabelPair(first="hawk", second="dove")]),
        {"pairs": [{"first": " hawk ", "second": "dove"}]},
        [("hawk", "dove")],
        [{"first": "hawk", "second": "dove"}],
    ],
)
async def test_opposition_reply_shapes_are_coerced(raw):
    oracle = LLMOppositionOracle(chain=_FakeChain(raw), max_attempts=1)

    assert await oracle.find_opposites(["hawk", "dove"], "Politics & Governance") == [("hawk", "dove")]


@pytest.mark.asyncio
async def test_opposition_payload_carries_category():
    chain = _FakeChain(OppositeLabelPairs())
    oracle = LLMOppositionOracle(chain=chain, max_attempts=1)

    assert await oracle.find_opposites(["a"], "Sports") == []
    assert chain.calls == [{"labels": "- a", "category": "Sports"}]


@pytest.mark.asyncio
async def test_malformed_opposition_reply_becomes_oracle_failure():
    chain = _FakeChain({"pairs": [{"first": "hawk"}]})
    oracle = LLMOppositionOracle(chain=chain, max_attempts=3)

    with pytest.raises(OracleFailure) as excinfo:
        await oracle.find_opposites(["hawk"], "Sports")

    assert excinfo.value.oracle == "opposition oracle"
    assert len(chain.calls) == 1


def test_oracle_requires_llm_or_chain():
    with pytest.raises(ValueError):
        LLMClassificationOracle()
    with pytest.raises(ValueError):
        LLMOppositionOracle()


@pytest.mark.asyncio
async def test_offline_model_sends_labels_to_fallback_and_finds_no_pairs():
    llm = build_chat_model("dummy-model")
    assert isinstance(llm, OfflineLabelingChatModel)

    classifier = LLMClassificationOracle(llm, max_attempts=1)
    pairer = LLMOppositionOracle(llm, max_attempts=1)

    assert await classifier.classify(["a"], Category.allowed()) == Category.ALL.value
    assert await pairer.find_opposites(["a", "b"], "Sports") == []
    assert llm.call_count == 2


@pytest.mark.asyncio
async def test_oracle_factories_honour_configured_dummy_models():
    classifier = build_classification_oracle("dummy-classifier")
    pairer = build_opposition_oracle("dummy-pairer")

    assert await classifier.classify(["a"], Category.allowed()) == "all"
    assert await pairer.find_opposites(["a"], "all") == []
