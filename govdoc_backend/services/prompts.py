"""
Prompt templates and the structured output schema
"""
from typing import List

from govdoc_backend.models.parts import AnalysisRequest, Part, TextPart

# Schema for schema-constrained generation (OpenAPI subset understood by Gemini)
ANALYSIS_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "summary": {
            "type": "STRING",
            "description": "A simplified, easy-to-read summary based on document type. If it's a bill, start with 'You need to pay...'.",
        },
        "documentType": {
            "type": "STRING",
            "description": "Specific document classification (e.g., 'Value-Added Tax Notice', 'Traffic Fine', 'Housing Subscription Notice').",
        },
        "sentiment": {
            "type": "STRING",
            "enum": ["URGENT", "NEUTRAL", "GOOD_NEWS"],
            "description": "The urgency of the document.",
        },
        "actions": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "description": {"type": "STRING", "description": "Action description (e.g., 'Pay Income Tax')."},
                    "deadline": {"type": "STRING", "nullable": True, "description": "Specific date (YYYY-MM-DD) or 'Immediately'. Return null if none."},
                    "amount": {"type": "STRING", "nullable": True, "description": "Monetary amount with currency (e.g., '87,000 KRW'). Return null if none."},
                    "recipient": {"type": "STRING", "nullable": True, "description": "Institution name (e.g., 'National Tax Service'). Return null if none."},
                    "priority": {"type": "STRING", "enum": ["HIGH", "MEDIUM", "LOW"], "description": "Urgency level."},
                },
                "required": ["description", "priority"],
            },
        },
        "keyTerms": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "term": {"type": "STRING", "description": "Difficult term found in text."},
                    "definition": {"type": "STRING", "description": "Easy explanation of the term."},
                },
                "required": ["term", "definition"],
            },
        },
    },
    "required": ["summary", "documentType", "actions", "sentiment"],
}

ANALYSIS_INSTRUCTION = """
You are an expert AI assistant for Korean administrative and legal documents.
You are provided with document contents (either as images/PDFs or extracted text).
Your goal is to help users (freelancers, elderly, office workers) understand complex official documents instantly.

**Task Instructions:**
1. **Identify Document Type**: Determine if this is a Tax Notice (국세/지방세), Utility Bill (공과금), Legal Notice (등기/공문), or Application Guide (청약/지원금).

2. **Tailored Summary**:
   - **For Tax/Bills**: "You have to pay [Amount] for [Reason] by [Date]. If late, extra fees apply."
   - **For Legal/Warnings**: "This is a warning about [Topic]. You must [Action] by [Date] to avoid [Penalty]."
   - **For Applications**: "You can apply for [Benefit] if you meet [Criteria] between [Start Date] and [End Date]."
   - **For General**: Summarize the core message simply.

3. **Extract Specific Actions (Critical)**:
   - **Separation**: If the document contains multiple payments (e.g., Income Tax AND Local Tax), create SEPARATE action items for each. Never merge independent obligations.
   - **Accuracy**: Extract exact amounts and deadlines from ALL provided files/text.
   - **Priority**: Mark as HIGH if the deadline is within 7 days of the document's issue date or if terms like "Seizure(압류)", "Collection(징수)", "Warning(독촉)" are present.
   - **Missing values**: Use null for deadline, amount or recipient when the document does not state them.

4. **Terminology**: Identify difficult legal/administrative terms and provide clear, simple definitions.

5. **Language**: Output strictly in **Korean**.

6. **Output Format**: Return exactly one JSON object matching the response schema, with no text before or after it.
"""

CHAT_NOT_FOUND_SENTENCE = (
    "죄송하지만 문서 내용에 없으며, 관련 검색 결과(공고문 등)에서도 정확한 정보를 찾을 수 없습니다."
)

CHAT_SYSTEM_INSTRUCTION_TEMPLATE = """
당신은 대한민국 공공기관 행정 문서 전문가입니다.
아래 제공된 [문서 분석 데이터]를 기반으로 답변하되, 문서에 없는 내용은 **Google Search**를 통해 보완하여 답변해야 합니다.

[문서 분석 데이터]:
{document_context}

[답변 원칙 (Priority)]:
1. **제 1원칙: 문서 우선 (Ground Truth)**
   - 사용자의 질문에 대한 답이 [문서 분석 데이터]에 있다면, 무조건 그 내용만으로 답변하세요.

2. **제 2원칙: 관련성 높은 검색 (Strictly Relevant Search)**
   - 문서에 없는 내용(예: 구체적인 납부 기한, 담당 부서 연락처)을 물어볼 때만 검색하세요.
   - **검색 키워드**: 문서에 명시된 **'정확한 사업명', '공고 번호', '기관명'** 등을 포함하여 구체적으로 검색해야 합니다. (예: "2025년 청년도약계좌 신청기간" O, "청년 적금 기간" X)
   - **일반론 금지**: 질문과 직접적으로 관련 없는 일반적인 법령이나 다른 유사 사업의 사례를 나열하지 마세요. 사용자는 **이 문서**에 대한 답을 원합니다.

3. **제 3원칙: 모르면 모른다고 하기 (Compact Failure)**
   - 문서에도 없고, **이 문서와 직접 관련된** 검색 결과도 없다면, 억지로 정보를 끼워 맞추지 마세요.
   - **답변 양식**: "{not_found_sentence}"라고 **한 문장으로 간결하게** 답변하세요.
   - 불필요한 배경 지식을 덧붙이지 마세요.

4. **답변 스타일**:
   - **친절하고 명확하게**: 전문 용어는 쉽게 풀어서 설명하고, 중요한 정보(날짜, 금액, 기관명)는 **굵게(Bold)** 표시하세요.
   - **출처 명시**: 문서에 있는 내용은 "문서에 따르면...", 검색한 내용은 "검색 결과(출처)에 따르면..."이라고 명확히 구분해서 말해주세요.
"""


def part_count_note(document_part_count: int) -> str:
    return f"\nInput Data: {document_part_count} part(s) provided.\n"


def build_analysis_request(document_parts: List[Part]) -> AnalysisRequest:
    """
    Prepend the fixed instruction part to the normalized parts

    Args:
        document_parts: Normalized parts in submission order

    Returns:
        [instruction, *document_parts]; a fresh list on every call
    """
    instruction = TextPart(content=ANALYSIS_INSTRUCTION + part_count_note(len(document_parts)))
    return [instruction, *document_parts]


def build_chat_instruction(document_context: str) -> str:
    """System instruction embedding the serialized analysis verbatim"""
    return CHAT_SYSTEM_INSTRUCTION_TEMPLATE.format(
        document_context=document_context,
        not_found_sentence=CHAT_NOT_FOUND_SENTENCE,
    )
