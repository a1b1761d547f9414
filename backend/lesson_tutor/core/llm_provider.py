"""
Model factories for the tutor agent and lesson embeddings.

The chat model drives the lesson_search ReAct loop, so every provider here
must support tool calling. The embedding model is shared by upserts and
retrieval queries, so changing it means re-upserting every lesson: vectors
from different models are not comparable.

  LLM_PROVIDER=openai (default, gpt-4o-mini at temperature 0) | gemini | groq
  EMBEDDING_PROVIDER=openai (default, text-embedding-ada-002) | gemini
  EMBEDDING_API_KEY falls back to LLM_API_KEY when one account serves both
"""

from langchain_core.embeddings import Embeddings
from langchain_core.language_models import BaseChatModel

from lesson_tutor.config import get_settings


def create_llm() -> BaseChatModel:
    """Chat model the tutor agent binds its retrieval tool to.

    Raises:
        ValueError: LLM_PROVIDER names an unsupported provider.
    """
    settings = get_settings()

    match settings.LLM_PROVIDER:
        case "openai":
            from langchain_openai import ChatOpenAI

            return ChatOpenAI(
                model=settings.LLM_MODEL,
                api_key=settings.LLM_API_KEY,
                temperature=settings.LLM_TEMPERATURE,
            )

        case "gemini":
            from langchain_google_genai import ChatGoogleGenerativeAI

            return ChatGoogleGenerativeAI(
                model=settings.LLM_MODEL,
                google_api_key=settings.LLM_API_KEY,
                temperature=settings.LLM_TEMPERATURE,
            )

        case "groq":
            from langchain_groq import ChatGroq

            return ChatGroq(
                model=settings.LLM_MODEL,
                api_key=settings.LLM_API_KEY,
                temperature=settings.LLM_TEMPERATURE,
            )

        case _:
            raise ValueError(
                f"Unknown LLM provider: '{settings.LLM_PROVIDER}'. "
                f"Supported: openai, gemini, groq"
            )


def create_embeddings() -> Embeddings:
    """Embedding model for lesson text and search queries.

    Output dimension must be at least EMBEDDING_DIMENSIONS; embed_text
    truncates to that width to match the pgvector column.
    """
    settings = get_settings()
    api_key = settings.EMBEDDING_API_KEY or settings.LLM_API_KEY

    match settings.EMBEDDING_PROVIDER:
        case "openai":
            from langchain_openai import OpenAIEmbeddings

            return OpenAIEmbeddings(
                model=settings.EMBEDDING_MODEL,
                api_key=api_key,
            )

        case "gemini":
            from langchain_google_genai import GoogleGenerativeAIEmbeddings

            return GoogleGenerativeAIEmbeddings(
                model=f"models/{settings.EMBEDDING_MODEL}",
                google_api_key=api_key,
            )

        case _:
            raise ValueError(
                f"Unknown embedding provider: '{settings.EMBEDDING_PROVIDER}'. "
                f"Supported: openai, gemini"
            )
