"""Summary Agent - turns article metadata into a short AI summary."""

import logging
import time
from typing import Any

from newsbrief.agents.completion import CompletionClient
from newsbrief.repositories import SummaryLogRepository

logger = logging.getLogger(__name__)


class SummaryAgent:
    """
    Generates article summaries through a completion backend.

    Every call is written to the summary call log. Failures are logged and
    re-raised; callers decide whether a failed summary matters.
    """

    SYSTEM_PROMPT = (
        "You are an expert at summarizing news articles concisely and clearly. "
        "Always respond in {language}."
    )

    URL_PROMPT = """Based on the title and source of the following news article, summarize what the article covers in 3-4 lines in {language}.

Title: {title}
Source: {source}
URL: {url}
{context}
Guidelines:
- Include only the core points that can be inferred from the information above
- Keep a factual tone rather than a speculative one
- Write so the reader can grasp the key point of the article"""

    CONTENT_PROMPT = """Summarize the following news article in 3-4 lines in {language}.

Title: {title}

Content:
{content}

Requirements:
- Include only the key information
- Keep an objective tone
- Help the reader quickly grasp the core of the article
- Stay within 3-4 lines"""

    def __init__(
        self,
        client: CompletionClient,
        log_repo: SummaryLogRepository | None = None,
        language: str = "English",
        max_tokens: int = 300,
        temperature: float = 0.3,
    ):
        self.client = client
        self.log_repo = log_repo
        self.language = language
        self.max_tokens = max_tokens
        self.temperature = temperature

    @property
    def model(self) -> str:
        return self.client.model

    def build_prompt(self, title: str, content: str) -> str:
        return self.CONTENT_PROMPT.format(language=self.language, title=title, content=content)

    def build_url_prompt(
        self,
        title: str,
        url: str,
        source: str,
        snippet: str | None = None,
        description: str | None = None,
    ) -> str:
        context_lines = []
        if snippet and snippet.strip():
            context_lines.append(f"Snippet: {snippet.strip()}")
        if description and description.strip() and description != snippet:
            context_lines.append(f"Description: {description.strip()}")
        context = "\n".join(context_lines) + "\n" if context_lines else ""

        return self.URL_PROMPT.format(
            language=self.language, title=title, source=source, url=url, context=context
        )

    async def summarize(
        self,
        title: str,
        url: str,
        source: str,
        article_id: str | None = None,
        snippet: str | None = None,
        description: str | None = None,
    ) -> str | None:
        """Summarize from title, source and URL plus any snippet or description."""
        prompt = self.build_url_prompt(title, url, source, snippet, description)
        return await self._generate(prompt, article_id)

    async def summarize_content(
        self,
        title: str,
        content: str,
        article_id: str | None = None,
    ) -> str | None:
        """Summarize article body text. Returns None without calling out when there is no content."""
        if not content or not content.strip():
            return None
        return await self._generate(self.build_prompt(title, content), article_id)

    async def summarize_batch(self, articles: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """
        Summarize each article independently.

        Args:
            articles: Items with "id", "title" and optional "content"

        Returns:
            One {"id", "summary"} per input; failed items carry summary None
        """
        results = []
        for article in articles:
            try:
                if article.get("content"):
                    summary = await self.summarize_content(
                        article["title"], article["content"], article["id"]
                    )
                else:
                    summary = await self.summarize(article["title"], "", "", article["id"])
                results.append({"id": article["id"], "summary": summary})
            except Exception as e:
                logger.error(f"Error generating summary for {article.get('id')}: {e}")
                results.append({"id": article.get("id"), "summary": None})
        return results

    async def _generate(self, prompt: str, article_id: str | None) -> str | None:
        system = self.SYSTEM_PROMPT.format(language=self.language)
        started = time.perf_counter()

        try:
            completion = await self.client.complete(
                system, prompt, max_tokens=self.max_tokens, temperature=self.temperature
            )
        except Exception as e:
            await self._record(
                prompt, article_id, started, status="error", error_message=str(e) or type(e).__name__
            )
            raise

        summary = completion.text.strip() if completion.text else None
        await self._record(
            prompt,
            article_id,
            started,
            status="success",
            response=summary,
            tokens_input=completion.prompt_tokens,
            tokens_output=completion.completion_tokens,
        )
        return summary or None

    async def _record(
        self,
        prompt: str,
        article_id: str | None,
        started: float,
        status: str,
        response: str | None = None,
        tokens_input: int | None = None,
        tokens_output: int | None = None,
        error_message: str | None = None,
    ) -> None:
        if not self.log_repo:
            return
        await self.log_repo.save(
            model=self.model,
            prompt=prompt,
            status=status,
            duration_ms=int((time.perf_counter() - started) * 1000),
            response=response,
            tokens_input=tokens_input,
            tokens_output=tokens_output,
            news_id=article_id,
            error_message=error_message,
        )
