# app/visionsystem/prompts.py
LAB_SHEET_PROMPT = """Esta imagem é uma foto ou captura de tela de exames laboratoriais de um paciente internado.

TAREFA:
1. Transcreva TODO o texto legível, mantendo datas, valores, unidades e valores de referência.
2. Depois da transcrição, devolva os resultados em um bloco JSON, no formato:

```json
{"Hb": "9,8", "Leuco": "1200", "Plaq": "45000", "PCR": "12,3", "Cr": "0,9"}
```

REGRAS:
- Use as abreviações usuais (Hb, Ht, Leuco, N, L, Plaq, PCR, Na, K, Cr, U, Mg, P, TGO, TGP, BT, GGT, FA, INR, DHL)
- Copie os valores exatamente como impressos (vírgula decimal)
- Se houver mais de uma data, use a mais recente no JSON
- Se nenhum valor for legível, não inclua o bloco JSON
- Nunca invente resultados que não estejam visíveis"""
