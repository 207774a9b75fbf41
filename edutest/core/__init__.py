"""
Ядро тестирования: проверка ответов, подсчет баллов, перемешивание,
попытка с таймером и допуск к тесту.

Ядро зависит только от порта хранилища `edutest.repository.store.DataStore`.
"""
