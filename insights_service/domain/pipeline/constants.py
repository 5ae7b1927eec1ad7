"""Domain pipeline constants.

The prompt text is owned by the pipeline and is not configuration.
"""

DEFAULT_BUCKET = "documentos_processos"
DEFAULT_INSIGHTS_TABLE = "processamentos_ia"

# Prompt window (characters of extracted text)
DEFAULT_WINDOW_HEAD_CHARS: int = 15_000
DEFAULT_WINDOW_TAIL_CHARS: int = 5_000
WINDOW_START_MARKER = "--- INÍCIO ---"
WINDOW_END_MARKER = "--- FIM ---"

DEFAULT_TEMPERATURE: float = 0.1
RESPONSE_FORMAT_JSON = "json"

SYSTEM_PROMPT = "Você é um Agente Jurídico. Retorne APENAS JSON."

RESPONSE_SCHEMA_DESCRIPTION = (
    "{\n"
    '  "tipo_documento": "string",\n'
    '  "resumo": "string",\n'
    '  "tem_prazo": boolean,\n'
    '  "dias_prazo": number|null,\n'
    '  "urgencia": "Alta"|"Média"|"Baixa",\n'
    '  "recomendacao": "string"\n'
    "}"
)
