"""Practice agents: sentence source, grader and ambient audio."""
from dgp.agents.base_agent import BaseAgent, AgentContext
from dgp.agents.sentence_source import SentenceSourceAgent, SentenceBatch, normalize_sentence
from dgp.agents.grader import GraderAgent, GradingVerdict
from dgp.agents.audio import AmbientAudioSource
