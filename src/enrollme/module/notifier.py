from typing import List

import aiohttp
import discord
from loguru import logger

from enrollme.model import Outcome


def _build_embeds(outcomes: List[Outcome]) -> List[discord.Embed]:
    embeds = []
    for outcome in outcomes:
        if not outcome.is_success:
            continue

        embed = discord.Embed(title=f"[ENROLLED] {outcome.course or outcome.section}", color=0x57F287)
        embed.add_field(name="Section ID", value=outcome.section, inline=True)
        embed.add_field(
            name="Confirmation Email", value="Sent" if outcome.email_sent else "Not sent", inline=True
        )
        embeds.append(embed)
    return embeds


async def send_enrollment_summary(webhook_url: str, outcomes: List[Outcome], enrolled: List[str]):
    """
    Sends the result of an enrollment run to the Discord webhook.

    One embed per successful enrollment, preceded by a summary line.

    Args:
        webhook_url: The Discord webhook URL.
        outcomes: Every outcome produced during the run.
        enrolled: The enrolled section IDs, in enrollment order.
    """
    embeds = _build_embeds(outcomes)
    content = f"## Enrolled in {len(enrolled)} sections\n\n{', '.join(enrolled) or 'None'}"

    # Discord allows max 10 embeds per webhook message
    chunks = [embeds[i : i + 10] for i in range(0, len(embeds), 10)] or [[]]

    async with aiohttp.ClientSession() as session:
        webhook = discord.Webhook.from_url(webhook_url, session=session)

        try:
            for i, chunk in enumerate(chunks):
                kwargs = {
                    "embeds": chunk,
                    "username": "EnrollMe",
                    "wait": True,
                }

                # Only include content (header) in the first message
                if i == 0:
                    kwargs["content"] = content

                logger.debug(f"Sending chunk {i + 1}/{len(chunks)} with {len(chunk)} embeds.")
                await webhook.send(**kwargs)

            logger.info("Enrollment summary sent to webhook.")

        except discord.HTTPException as e:
            logger.error(f"Error sending to webhook: {e}")
        except Exception as e:
            logger.error(f"An unexpected error occurred: {e}")
