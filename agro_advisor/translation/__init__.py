"""
Translation overlay: rebuild a finished ``Advisory`` in another language.

Modules
-------
reconstructor : flatten_advisory_texts() + reassemble_advisory() +
                translate_advisory() — fixed-order, all-or-nothing rebuild.
service       : TranslationService — batch contract chaining API → dictionary
                → original text.
api_client    : ApiTranslator — Google / Azure over httpx.AsyncClient with
                concurrent per-text fan-out.
dictionary    : DictionaryTranslator — offline farming-term substitution.
"""
