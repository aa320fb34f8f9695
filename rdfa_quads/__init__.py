"""rdfa_quads — RDFa 1.1 Core evaluation of HTML into RDF quads.

The package turns RDFa-annotated HTML into an ordered sequence of quads
(subject, predicate, object, graph). The pieces:

- Tokenizer (rdfa_quads.tokenizer): html.parser adapter emitting element events
- Evaluator (rdfa_quads.evaluator): context stack, subject/object resolution,
  incomplete-triple completion
- Resolution (rdfa_quads.resolution): IRI, CURIE, safe CURIE and term expansion
- Lists (rdfa_quads.lists): RDF collections built from @inlist
- Sink (rdfa_quads.sink): buffered output with data/error/end listeners
- Parser (rdfa_quads.parser): RDFaParser facade and parse_rdfa()

Terms are built by a pluggable factory. The default one (rdfa_quads.terms)
produces the frozen dataclasses of rdfa_quads.types; the rdflib bridge
(rdfa_quads.rdflib_bridge) produces rdflib terms and converts results into an
rdflib Dataset. Requires rdflib for the bridge only.
"""
