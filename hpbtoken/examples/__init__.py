"""
Declarative token sale scenarios.

* :py:mod:`.scenario`: Scenario model (transactions, block advances, assertions) and the scenario runner
* :py:mod:`.scenarios`: Collection of all scenarios which are defined in the sales directory
"""
