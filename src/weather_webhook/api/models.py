"""Dialogflow webhook request and response models."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class IntentInfo(BaseModel):
    """Matched intent."""
    model_config = ConfigDict(populate_by_name=True)

    display_name: str = Field("", alias="displayName", description="Intent display name")


class QueryResult(BaseModel):
    """Result of intent matching for one user utterance."""
    model_config = ConfigDict(populate_by_name=True)

    query_text: Optional[str] = Field(None, alias="queryText")
    intent: IntentInfo = Field(default_factory=IntentInfo)
    parameters: Dict[str, Any] = Field(default_factory=dict, description="Extracted parameters")


class WebhookRequest(BaseModel):
    """Fulfillment request sent by Dialogflow."""
    model_config = ConfigDict(populate_by_name=True)

    query_result: QueryResult = Field(default_factory=QueryResult, alias="queryResult")


class WebhookResponse(BaseModel):
    """Fulfillment response returned to Dialogflow."""
    model_config = ConfigDict(populate_by_name=True)

    fulfillment_text: str = Field(..., alias="fulfillmentText", description="Reply spoken to the user")
    payload: Optional[Dict[str, Any]] = Field(None, description="Custom payload, carries errorCode on failure")

    @classmethod
    def from_error(cls, text: str, code: str) -> "WebhookResponse":
        return cls(fulfillment_text=text, payload={"errorCode": code})
