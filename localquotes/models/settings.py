"""
Runtime settings for Local Quotes.
"""

from pydantic import BaseModel, Field


SECONDS_IN_DAY = 86400


class LocalQuotesSettings(BaseModel):
    """
    Typed view of the `quotes` configuration section.
    """

    quote_tag: str = Field(
        "quotes",
        description="Tag that marks a note as a quote listing"
    )

    default_reload_interval: int = Field(
        SECONDS_IN_DAY,
        ge=0,
        description="Default refresh interval of recurring blocks, in seconds"
    )

    minimal_quote_length: int = Field(
        5,
        ge=0,
        description="Quotes shorter than this are not imported"
    )

    auto_generated_id_length: int = Field(
        5,
        ge=1,
        description="Length of ids generated for new blocks"
    )

    use_weighted_random: bool = Field(
        False,
        description="Weight authors by how many eligible quotes they have"
    )

    weighted_on_creation: bool = Field(
        False,
        description="Also apply weighted random when a recurring block is first created"
    )

    template_folder: str = Field(
        "",
        description="Folder whose notes never receive a one-time quote"
    )
